"""Serialise python values to YAML"""
from __future__ import annotations

from importlib import metadata

from .dumper import Dumper, dump
from .errors import ConfigurationError, UnsupportedValueError
from .schema import (
    CORE_SCHEMA,
    DEFAULT_SCHEMA,
    DirectConverter,
    Schema,
    StyleTable,
    Tagged,
    Type,
)

# https://packaging.python.org/en/latest/guides/single-sourcing-package-version/
__version__ = metadata.version(__name__)
__author__ = "The yamldump developers"
__copyright__ = f"2024, {__author__}"

__all__ = (
    "dump",
    "Dumper",
    "Tagged",
    "Type",
    "Schema",
    "DirectConverter",
    "StyleTable",
    "CORE_SCHEMA",
    "DEFAULT_SCHEMA",
    "ConfigurationError",
    "UnsupportedValueError",
)
