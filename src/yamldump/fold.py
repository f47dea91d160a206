"""``yamldump.fold``: Line folding for folded block scalars
=======================================================

In a folded scalar a single line break between two lines is read back as a
space, so long lines can be wrapped by replacing some of their spaces with
newlines:

    >>> fold_line("The quick brown fox jumps over the lazy dog", 20)
    'The quick brown fox\\njumps over the lazy\\ndog'

The inverse transformation (done by the reader) adds a few constraints:

+ A line starting with a space is "more indented" and is never folded (a
  break followed by a space would be read back as a newline and a space).
+ *k* consecutive line breaks are read back as *k - 1* newlines, unless they
  are next to a more indented line or at the start/end of the text.
"""
from __future__ import annotations

import re
from typing import Final

from yamldump import layout

__all__ = ("fold_line", "fold_string")

# A break can only replace a space that is followed by a non-space
# character. This means a break never happens at position 0 and a folded line
# never starts with a space.
WORD_BREAK_RE: Final = re.compile(r" (?=[^ ])")

# A run of line breaks followed by a content line (which might be empty)
LINE_RE: Final = re.compile(r"(\n+)([^\n]*)")


def fold_line(line: str, width: int) -> str:
    """Greedily wrap *line* so that every line fits in *width* if possible.

    Words longer than *width* overflow: they are put on a line by
    themselves.
    """
    if line == "" or line[0] == " ":
        return line
    doc = layout.EMPTY
    first = True
    for word in WORD_BREAK_RE.split(line):
        if not first:
            doc += layout.BREAK
        else:
            first = False
        doc += layout.text(word)
    return layout.fill(doc).to_string(width)


def fold_string(string: str, width: int) -> str:
    """Fold every line of *string*.

    *string* should be non-empty and only contain printable characters.
    """
    first_break = string.find("\n")
    if first_break == -1:
        first_break = len(string)
    out = [fold_line(string[:first_break], width)]
    # We haven't reached the first content line yet, don't add an extra \n.
    prev_more_indented = string[0] in "\n "
    for match in LINE_RE.finditer(string, first_break):
        prefix, line = match.groups()
        more_indented = line[:1] == " "
        out.append(prefix)
        if not prev_more_indented and not more_indented and line != "":
            out.append("\n")
        out.append(fold_line(line, width))
        prev_more_indented = more_indented
    return "".join(out)
