from __future__ import annotations

__all__ = ("ConfigurationError", "UnsupportedValueError")


class ConfigurationError(TypeError):
    """The options or the schema passed to the dumper are invalid."""


class UnsupportedValueError(TypeError):
    """A value has a type that the schema doesn't know how to write."""
