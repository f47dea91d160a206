"""``yamldump.scalar``: Scalar encoding
====================================

Picks one of the five YAML scalar styles for a string and renders it:

    >>> print(encode_scalar("hello world", 0, False))
    hello world
    >>> print(encode_scalar("true", 0, False, is_ambiguous=lambda s: True))
    'true'
    >>> print(encode_scalar("bell\\a", 0, False))
    "bell\\a"
    >>> print(encode_scalar("line 1\\nline 2\\n", 1, False))
    |
      line 1
      line 2

"""
from __future__ import annotations

import enum
import re
from typing import Callable, Final

from yamldump import fold
from yamldump.chars import (
    LINE_FEED,
    is_plain_safe,
    is_plain_safe_first,
    is_printable,
    is_whitespace,
)

__all__ = (
    "ScalarStyle",
    "choose_scalar_style",
    "encode_scalar",
    "escape_string",
    "block_header",
    "indent_string",
)


class ScalarStyle(enum.Enum):
    PLAIN = enum.auto()
    SINGLE = enum.auto()
    LITERAL = enum.auto()
    FOLDED = enum.auto()
    DOUBLE = enum.auto()


ESCAPE_SEQUENCES: Final = {
    0x00: "\\0",
    0x07: "\\a",
    0x08: "\\b",
    0x09: "\\t",
    0x0A: "\\n",
    0x0B: "\\v",
    0x0C: "\\f",
    0x0D: "\\r",
    0x1B: "\\e",
    0x22: '\\"',
    0x5C: "\\\\",
    0x85: "\\N",
    0xA0: "\\_",
    0x2028: "\\L",
    0x2029: "\\P",
}

# YAML 1.1 booleans that a YAML 1.2 reader sees as strings
DEPRECATED_BOOLEANS: Final = frozenset(
    (
        "y",
        "Y",
        "yes",
        "Yes",
        "YES",
        "on",
        "On",
        "ON",
        "n",
        "N",
        "no",
        "No",
        "NO",
        "off",
        "Off",
        "OFF",
    )
)

LEADING_SPACE_RE: Final = re.compile(r"\n* ")

#: Line width value that disables folding
UNLIMITED: Final = -1


def _never_ambiguous(s: str) -> bool:
    return False


def char_code_to_hex(c: int) -> str:
    if c <= 0xFF:
        return f"\\x{c:02X}"
    if c <= 0xFFFF:
        return f"\\u{c:04X}"
    if c <= 0xFFFFFFFF:
        return f"\\U{c:08X}"
    raise ValueError(
        "Code point within a string may not be greater than 0xFFFFFFFF"
    )


def need_indent_indicator(string: str) -> bool:
    """Does the block scalar start with a space (after its leading breaks)?

    The reader infers the indentation from the first non-empty line, so we
    have to spell it out when that line is more indented.
    """
    return LEADING_SPACE_RE.match(string) is not None


def choose_scalar_style(
    string: str,
    single_line_only: bool,
    indent_per_level: int,
    line_width: int,
    is_ambiguous: Callable[[str], bool],
) -> ScalarStyle:
    """Determines the possible scalar styles and returns the preferred one.

    *string* must not be empty. *line_width* is the width available at the
    current level, :const:`UNLIMITED` means there is no limit.

    Post-conditions:

    + ``PLAIN`` or ``SINGLE``: there are no line feeds in *string*.
    + ``LITERAL``: no line is suitable for folding.
    + ``FOLDED``: a line is longer than *line_width* and can be folded.
    """
    track_width = line_width != UNLIMITED
    has_line_break = False
    # only checked if track_width
    has_foldable_line = False
    previous_line_break = -1

    def foldable(end: int) -> bool:
        # Too long and not more-indented
        start = previous_line_break + 1
        return end - start > line_width and string[start : start + 1] != " "

    plain = is_plain_safe_first(ord(string[0])) and not is_whitespace(
        ord(string[-1])
    )
    for i, char in enumerate(string):
        c = ord(char)
        if c == LINE_FEED and not single_line_only:
            has_line_break = True
            if track_width:
                has_foldable_line = has_foldable_line or foldable(i)
                previous_line_break = i
        elif not is_printable(c):
            return ScalarStyle.DOUBLE
        plain = plain and is_plain_safe(c)

    if not single_line_only and track_width:
        # The last line isn't terminated by a line feed
        has_foldable_line = has_foldable_line or foldable(len(string))

    # Every style can represent \n but block styles are easier to read and
    # don't add empty lines. Super long lines are folded.
    if not has_line_break and not has_foldable_line:
        # Strings that would be read back as another type have to be quoted
        # (e.g. the string 'true' vs. the boolean true).
        if plain and not is_ambiguous(string):
            return ScalarStyle.PLAIN
        return ScalarStyle.SINGLE
    # Block indentation indicators only have one digit.
    if indent_per_level > 9 and need_indent_indicator(string):
        return ScalarStyle.DOUBLE
    return ScalarStyle.FOLDED if has_foldable_line else ScalarStyle.LITERAL


def escape_string(string: str) -> str:
    """Escape *string* for a double quoted scalar.

    Surrogate pairs are combined into one escaped code point.
    """
    out = []
    i = 0
    size = len(string)
    while i < size:
        c = ord(string[i])
        if 0xD800 <= c <= 0xDBFF and i + 1 < size:
            low = ord(string[i + 1])
            if 0xDC00 <= low <= 0xDFFF:
                combined = (c - 0xD800) * 0x400 + low - 0xDC00 + 0x10000
                out.append(char_code_to_hex(combined))
                i += 2
                continue
        escape = ESCAPE_SEQUENCES.get(c)
        if escape is not None:
            out.append(escape)
        elif is_printable(c):
            out.append(string[i])
        else:
            out.append(char_code_to_hex(c))
        i += 1
    return "".join(out)


def block_header(string: str, indent_per_level: int) -> str:
    """Header line of a block scalar: indentation and chomping indicators."""
    indicator = str(indent_per_level) if need_indent_indicator(string) else ""
    # The string "\n" counts as a "trailing" empty line.
    clip = string.endswith("\n")
    keep = clip and (string.endswith("\n\n") or string == "\n")
    chomp = "+" if keep else "" if clip else "-"
    return f"{indicator}{chomp}\n"


def indent_string(string: str, spaces: int) -> str:
    """Indent every non-empty line of *string* by *spaces*."""
    indent = " " * spaces
    return "\n".join(
        indent + line if line else line for line in string.split("\n")
    )


def _trim_trailing_newline(string: str) -> str:
    return string[:-1] if string.endswith("\n") else string


def encode_scalar(
    string: str,
    level: int,
    is_key: bool,
    *,
    indent: int = 2,
    line_width: int = 80,
    flow_level: int = -1,
    compat_mode: bool = True,
    is_ambiguous: Callable[[str], bool] = _never_ambiguous,
) -> str:
    """Render *string* as a scalar nested at *level*.

    The last newline of a block scalar is always dropped because the caller
    adds its own; text without a trailing newline already uses the "strip"
    chomping indicator so this is lossless.

    Args:
      string: the text to encode.
      level: nesting depth of the scalar.
      is_key: the scalar is a mapping key (which rules out block styles).
      indent: spaces per indentation level.
      line_width: preferred maximum line length, ``-1`` for no limit.
      flow_level: nesting depth from which collections are written in flow
        style (``-1`` to never switch).
      compat_mode: quote the YAML 1.1 booleans (``yes``, ``off``...).
      is_ambiguous: tells whether an unquoted string would be read back as
        something other than a string.
    """
    if string == "":
        return "''"
    if compat_mode and string in DEPRECATED_BOOLEANS:
        return f"'{string}'"

    # no 0-indent scalars
    spaces = indent * max(1, level)
    # As indentation gets deeper the width decreases monotonically down to
    # min(line_width, 40).
    width = (
        UNLIMITED
        if line_width == UNLIMITED
        else max(min(line_width, 40), line_width - spaces)
    )
    # Without knowing if keys are implicit or explicit, assume implicit. There
    # are no block styles in flow mode.
    single_line_only = is_key or (flow_level > -1 and level >= flow_level)

    match choose_scalar_style(
        string, single_line_only, indent, width, is_ambiguous
    ):
        case ScalarStyle.PLAIN:
            return string
        case ScalarStyle.SINGLE:
            return "'" + string.replace("'", "''") + "'"
        case ScalarStyle.LITERAL:
            return "|" + block_header(string, indent) + _trim_trailing_newline(
                indent_string(string, spaces)
            )
        case ScalarStyle.FOLDED:
            return ">" + block_header(string, indent) + _trim_trailing_newline(
                indent_string(fold.fold_string(string, width), spaces)
            )
        case ScalarStyle.DOUBLE:
            return '"' + escape_string(string) + '"'
    assert False, "invalid scalar style"  # pragma: no cover
