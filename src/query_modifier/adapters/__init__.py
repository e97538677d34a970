"""Builders for specific backends."""

from __future__ import annotations

from .mongo import Lookup, MongoFindQuery

__all__ = ["Lookup", "MongoFindQuery"]
