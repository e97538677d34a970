"""Framework integrations; each submodule needs its optional extra."""
