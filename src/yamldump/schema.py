"""``yamldump.schema``: Type matchers
==================================

A :class:`Schema` tells the dumper how to turn values that aren't strings,
lists or dicts into something it can print. It is made of two ordered lists
of :class:`Type`:

+ *implicit* types are written without a tag. Their ``represent`` function
  must produce the final text of the scalar, and their ``resolve`` function is
  used to find out which strings would be misread as one of them if they
  weren't quoted.
+ *explicit* types are written with their tag (``!<tag> ...``).

Adding support for :class:`complex` numbers::

    >>> import yamldump
    >>> COMPLEX = Type(
    ...     "tag:example.com,2024:complex",
    ...     predicate=lambda v: isinstance(v, complex),
    ...     represent=lambda v, style: [v.real, v.imag],
    ... )
    >>> schema = DEFAULT_SCHEMA.extend(explicit=[COMPLEX])
    >>> print(yamldump.dump({"z": 1 + 2j}, schema=schema), end="")
    z: !<tag:example.com,2024:complex>
      - 1.0
      - 2.0

"""
from __future__ import annotations

import base64
import collections.abc
import dataclasses
import datetime
import math
import re
from typing import Any, Callable, Final, Iterable, Literal, Mapping, TypeAlias

__all__ = (
    "Tagged",
    "Type",
    "Schema",
    "DirectConverter",
    "StyleTable",
    "NULL",
    "BOOL",
    "INT",
    "FLOAT",
    "TIMESTAMP",
    "MERGE",
    "BINARY",
    "SET",
    "CORE_SCHEMA",
    "DEFAULT_SCHEMA",
    "expand_tag",
)

Kind: TypeAlias = Literal["scalar", "sequence", "mapping"]

RepresentFn: TypeAlias = Callable[[Any, str | None], Any]

YAML_TAG_PREFIX: Final = "tag:yaml.org,2002:"


def expand_tag(tag: str) -> str:
    """Expand the ``!!`` shorthand to the ``tag:yaml.org,2002:`` prefix.

    >>> expand_tag("!!int")
    'tag:yaml.org,2002:int'
    """
    if tag.startswith("!!"):
        return YAML_TAG_PREFIX + tag[2:]
    return tag


@dataclasses.dataclass(frozen=True, slots=True)
class Tagged:
    """A value written with an explicit tag.

    >>> Tagged("!!str", 5)
    Tagged(tag='tag:yaml.org,2002:str', value=5)
    """

    tag: str
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", expand_tag(self.tag))


@dataclasses.dataclass(frozen=True, slots=True)
class DirectConverter:
    """A represent function that handles every style."""

    fn: RepresentFn


@dataclasses.dataclass(frozen=True, slots=True)
class StyleTable:
    """One represent function per supported style."""

    table: Mapping[str, RepresentFn]


Represent: TypeAlias = DirectConverter | StyleTable


def _as_represent(
    represent: Represent | RepresentFn | Mapping[str, RepresentFn] | None,
) -> Represent | None:
    match represent:
        case None | DirectConverter() | StyleTable():
            return represent
        case collections.abc.Mapping():
            return StyleTable(dict(represent))
        case _ if callable(represent):
            return DirectConverter(represent)
    raise TypeError(
        "represent should be a function or a mapping of style names to "
        f"functions (got {type(represent).__name__!r})"
    )


@dataclasses.dataclass(frozen=True, slots=True, init=False)
class Type:
    """Describes how one kind of value is written.

    Args:
      tag: The YAML tag of the type (the ``!!`` shorthand is expanded).
      kind: Which kind of node the represented value is.
      predicate: Does a value belong to this type?
      resolve: Would this text be read back as a value of this type?
      represent: Converts a value to a printable one. Either a function
        ``(value, style) -> printable`` or a mapping from style names to such
        functions.
      default_style: The style used when none was configured for this tag.
    """

    tag: str
    kind: Kind
    predicate: Callable[[Any], bool] | None
    resolve: Callable[[str], bool] | None
    represent: Represent | None
    default_style: str | None

    def __init__(
        self,
        tag: str,
        kind: Kind = "scalar",
        *,
        predicate: Callable[[Any], bool] | None = None,
        resolve: Callable[[str], bool] | None = None,
        represent: Represent
        | RepresentFn
        | Mapping[str, RepresentFn]
        | None = None,
        default_style: str | None = None,
    ) -> None:
        object.__setattr__(self, "tag", expand_tag(tag))
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "predicate", predicate)
        object.__setattr__(self, "resolve", resolve)
        object.__setattr__(self, "represent", _as_represent(represent))
        object.__setattr__(self, "default_style", default_style)


@dataclasses.dataclass(frozen=True, slots=True)
class Schema:
    """Ordered lists of implicit and explicit types.

    The first type whose predicate matches a value wins, implicit types are
    tried first.
    """

    implicit: tuple[Type, ...] = ()
    explicit: tuple[Type, ...] = ()

    def extend(
        self, *, implicit: Iterable[Type] = (), explicit: Iterable[Type] = ()
    ) -> Schema:
        """Returns a new schema with extra types appended."""
        return Schema(
            implicit=(*self.implicit, *implicit),
            explicit=(*self.explicit, *explicit),
        )

    def is_ambiguous(self, string: str) -> bool:
        """Would *string* be read back as a non string if left unquoted?"""
        return any(
            ty.resolve is not None and ty.resolve(string)
            for ty in self.implicit
        )


def _matches(regex: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda s: regex.fullmatch(s) is not None


def _constant(value: str) -> RepresentFn:
    return lambda _v, _style: value


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _signed(prefix: str, fmt: str) -> RepresentFn:
    def represent(v: int, style: str | None) -> str:
        sign = "-" if v < 0 else ""
        return f"{sign}{prefix}{abs(v):{fmt}}"

    return represent


_NULL_RE: Final = re.compile(r"(?:~|null|Null|NULL)?")

NULL: Final = Type(
    "!!null",
    predicate=lambda v: v is None,
    resolve=_matches(_NULL_RE),
    represent={
        "canonical": _constant("~"),
        "lowercase": _constant("null"),
        "uppercase": _constant("NULL"),
        "camelcase": _constant("Null"),
        "empty": _constant(""),
    },
    default_style="lowercase",
)

_BOOL_RE: Final = re.compile(r"true|True|TRUE|false|False|FALSE")

BOOL: Final = Type(
    "!!bool",
    predicate=lambda v: isinstance(v, bool),
    resolve=_matches(_BOOL_RE),
    represent={
        "lowercase": lambda v, _style: "true" if v else "false",
        "uppercase": lambda v, _style: "TRUE" if v else "FALSE",
        "camelcase": lambda v, _style: "True" if v else "False",
    },
    default_style="lowercase",
)

# Digits can be separated by "_" but the number can't start or end with one.
_INT_RE: Final = re.compile(
    r"""[-+]?(?:
        0b[01](?:[01_]*[01])?
        |0o[0-7](?:[0-7_]*[0-7])?
        |0x[0-9a-fA-F](?:[0-9a-fA-F_]*[0-9a-fA-F])?
        |[0-9](?:[0-9_]*[0-9])?
    )""",
    re.VERBOSE,
)

INT: Final = Type(
    "!!int",
    predicate=_is_int,
    resolve=_matches(_INT_RE),
    represent={
        "binary": _signed("0b", "b"),
        "octal": _signed("0o", "o"),
        "decimal": lambda v, _style: str(v),
        "hexadecimal": _signed("0x", "X"),
    },
    default_style="decimal",
)

_FLOAT_RE: Final = re.compile(
    r"""(?:
        [-+]?[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][-+]?[0-9]+)?
        |\.[0-9_]+(?:[eE][-+]?[0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN)
    )""",
    re.VERBOSE,
)

_FLOAT_SPECIALS: Final = {
    "lowercase": (".nan", ".inf"),
    "uppercase": (".NAN", ".INF"),
    "camelcase": (".NaN", ".Inf"),
}


def _resolve_float(data: str) -> bool:
    return _FLOAT_RE.fullmatch(data) is not None and not data.endswith("_")


def _represent_float(v: float, style: str | None) -> str:
    nan, inf = _FLOAT_SPECIALS.get(
        style or "lowercase", _FLOAT_SPECIALS["lowercase"]
    )
    if math.isnan(v):
        return nan
    if math.isinf(v):
        return inf if v > 0 else "-" + inf
    res = repr(v)
    # `repr(1e17)` is '1e+17', which isn't a float in YAML 1.1
    if "e" in res and "." not in res:
        res = res.replace("e", ".0e", 1)
    return res


FLOAT: Final = Type(
    "!!float",
    predicate=lambda v: isinstance(v, float),
    resolve=_resolve_float,
    represent=_represent_float,
    default_style="lowercase",
)

_TIMESTAMP_RE: Final = re.compile(
    r"""[0-9]{4}-[0-9]{2}-[0-9]{2}
    |[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}
     (?:[Tt]|[ \t]+)[0-9]{1,2}:[0-9]{2}:[0-9]{2}
     (?:\.[0-9]*)?
     (?:[ \t]*(?:Z|[-+][0-9]{1,2}(?::?[0-9]{2})?))?""",
    re.VERBOSE,
)

TIMESTAMP: Final = Type(
    "!!timestamp",
    predicate=lambda v: isinstance(v, datetime.date),
    resolve=_matches(_TIMESTAMP_RE),
    represent=lambda v, _style: v.isoformat(),
)

MERGE: Final = Type("!!merge", "mapping", resolve=lambda s: s == "<<")

BINARY: Final = Type(
    "!!binary",
    predicate=lambda v: isinstance(v, bytes | bytearray),
    represent=lambda v, _style: base64.b64encode(v).decode("ascii"),
)


def _set_member_key(v: Any) -> tuple[str, Any]:
    return type(v).__name__, v


SET: Final = Type(
    "!!set",
    "mapping",
    predicate=lambda v: isinstance(v, set | frozenset),
    represent=lambda v, _style: dict.fromkeys(sorted(v, key=_set_member_key)),
)

#: null, booleans, integers and floats
CORE_SCHEMA: Final = Schema(implicit=(NULL, BOOL, INT, FLOAT))

#: The core schema, timestamps, merge keys, binary data and sets
DEFAULT_SCHEMA: Final = CORE_SCHEMA.extend(
    implicit=(TIMESTAMP, MERGE), explicit=(BINARY, SET)
)
