"""ModifierOptions: extraction and application settings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .operators import VALID_OPERATORS


class ModifierOptions(BaseModel):
    """
    Immutable settings for ``get_query_modifier``.

    Attributes:
        defaults: Fallback values for operators that are absent or ``None``.
        ignore: Operators left untouched by extraction. A ``{name: bool}``
            mapping is accepted; only truthy entries count.
        delete_ignored: Remove ignored operators from the source anyway.
        allow: Extra operator names, in application order.
        default_limit: Limit assumed by ``$page`` when ``$limit`` is absent.
        page_overrides_skip: When ``True``, ``$page`` replaces the skip
            applied by an explicit ``$skip``. When ``False``, an explicit
            ``$skip`` wins and ``$page`` only supplies the limit default.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    defaults: dict[str, Any] = Field(default_factory=dict)
    ignore: frozenset[str] = Field(default_factory=frozenset)
    delete_ignored: bool = Field(default=False, alias="deleteIgnored")
    allow: tuple[str, ...] = ()
    default_limit: int = Field(default=20, ge=1)
    page_overrides_skip: bool = True

    @field_validator("defaults", mode="before")
    @classmethod
    def _coerce_defaults(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("ignore", mode="before")
    @classmethod
    def _coerce_ignore(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, Mapping):
            return frozenset(k for k, v in value.items() if v)
        if isinstance(value, str):
            return frozenset([value])
        return value

    @field_validator("allow", mode="before")
    @classmethod
    def _coerce_allow(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(value)

    @classmethod
    def coerce(cls, value: ModifierOptions | Mapping[str, Any] | None) -> ModifierOptions:
        """Build options from ``None``, a plain mapping, or an instance."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    @property
    def valid_operators(self) -> tuple[str, ...]:
        """Built-ins followed by allowed extras, without duplicates."""
        return VALID_OPERATORS + self.custom_operators

    @property
    def custom_operators(self) -> tuple[str, ...]:
        """Allowed operators that are not built in, in declaration order."""
        seen: set[str] = set(VALID_OPERATORS)
        out: list[str] = []
        for name in self.allow:
            if name not in seen:
                seen.add(name)
                out.append(name)
        return tuple(out)

    def is_ignored(self, operator: str) -> bool:
        return operator in self.ignore

    def with_allowed(self, names: Iterable[str]) -> ModifierOptions:
        """Return a copy with *names* appended to ``allow``."""
        extra = tuple(n for n in names if n not in self.allow)
        if not extra:
            return self
        return self.model_copy(update={"allow": self.allow + extra})
