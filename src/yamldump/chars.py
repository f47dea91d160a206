"""``yamldump.chars``: Code point predicates
=========================================

Every predicate takes an integer code point (the result of :func:`ord`).

    >>> is_plain_safe_first(ord("a")), is_plain_safe_first(ord("-"))
    (True, False)

"""
from __future__ import annotations

from typing import Final

__all__ = (
    "is_printable",
    "is_whitespace",
    "is_plain_safe",
    "is_plain_safe_first",
)

TAB: Final = 0x09
LINE_FEED: Final = 0x0A
SPACE: Final = 0x20
BOM: Final = 0xFEFF

# c-flow-indicator
FLOW_INDICATORS: Final = frozenset(map(ord, ",[]{}"))

# c-indicator
INDICATORS: Final = frozenset(map(ord, "-?:,[]{}#&*!|>'\"%@`"))


def is_whitespace(c: int) -> bool:
    return c == SPACE or c == TAB


def is_printable(c: int) -> bool:
    """Can *c* be printed without escaping?

    Derived from nb-char minus tab, NEL (0x85), NBSP (0xA0) and the unicode
    line/paragraph separators.
    """
    return (
        (0x20 <= c <= 0x7E)
        or (0xA1 <= c <= 0xD7FF and c != 0x2028 and c != 0x2029)
        or (0xE000 <= c <= 0xFFFD and c != BOM)
        or (0x10000 <= c <= 0x10FFFF)
    )


def is_plain_safe(c: int) -> bool:
    """Is *c* allowed after the first character of a plain scalar?"""
    # nb-char - c-flow-indicator - ":" - "#"
    return (
        is_printable(c)
        and c != BOM
        and c not in FLOW_INDICATORS
        and c != 0x3A  # :
        and c != 0x23  # #
    )


def is_plain_safe_first(c: int) -> bool:
    """Is *c* allowed as the first character of a plain scalar?"""
    # ns-char - c-indicator
    return is_plain_safe(c) and not is_whitespace(c) and c not in INDICATORS
