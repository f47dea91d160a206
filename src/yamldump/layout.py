"""``yamldump.layout``: Width aware document layout
================================================

A small layout engine in the style of Christian Lindig's "strictly pretty"
[`pdf <https://lindig.github.io/papers/strictly-pretty-2000.pdf>`_] with the
fill groups from the `QuickC-- implementation
<https://github.com/nrnrnr/qc--/blob/master/cllib/pp.nw>`_.

Documents are built out of text and breaks. Every break is rendered either as
its text (usually a space) or as a newline, depending on the mode of the
enclosing group:

    >>> words = text("one") + BREAK + text("two") + BREAK + text("three")
    >>> fill(words).to_string(9)
    'one two\\nthree'
    >>> fill(words).to_string(80)
    'one two three'

Only the pieces needed to fold scalars are implemented: there is no nesting,
a newline is never followed by indentation.
"""

from __future__ import annotations

import dataclasses
import enum
import io
from typing import TextIO

__all__ = (
    "Doc",
    "EMPTY",
    "text",
    "BREAK",
    "fill",
)


class Mode(enum.Enum):
    "Specify the layout of a group"

    #: Breaks are never turned into newlines.
    FLAT = enum.auto()
    #: Each break is turned into a newline only if the next chunk doesn't fit.
    FILL = enum.auto()


class Doc:
    """Type used to represent documents

    Documents can be concatenated via the ``+`` operator.
    """

    def __add__(self, other: Doc) -> Doc:
        return DocCons(self, other)

    def to_string(self, width: int = 80) -> str:
        """Render this document to a string

        args:
          width(int):
        """
        return to_string(width, self)


@dataclasses.dataclass(slots=True)
class DocNil(Doc):
    pass


@dataclasses.dataclass(slots=True)
class DocCons(Doc):
    left: Doc
    right: Doc


@dataclasses.dataclass(slots=True)
class DocText(Doc):
    text: str


@dataclasses.dataclass(slots=True)
class DocBreak(Doc):
    text: str


@dataclasses.dataclass(slots=True)
class DocGroup(Doc):
    mode: Mode
    doc: Doc


#: The empty document
EMPTY: Doc = DocNil()


def text(s: str) -> Doc:
    """Turns a string into a document

    The string should not contain any newline.
    """
    return DocText(s)


#: A break rendered either as a space or as a newline
BREAK: Doc = DocBreak(" ")


def fill(doc: Doc) -> Doc:
    """Group where breaks are considered individually.

    Every break becomes a newline only when the text up to the next break
    wouldn't fit on the current line.
    """
    return DocGroup(Mode.FILL, doc)


# The layout algorithm deconstructs/reconstructs the head of the work list a
# lot. Python lists would turn a lot of O(1) operations into O(n) ones, so we
# use a hand rolled linked list.
@dataclasses.dataclass(slots=True)
class LL:
    mode: Mode
    doc: Doc
    _succ: LL | None = None


def fits(w: int, elts: LL | None) -> bool:
    """Does the work list fit in *w* characters up to its next line break?"""
    while w >= 0:
        match elts:
            case None:
                return True
            case LL(_, DocNil(), z):
                elts = z
            case LL(m, DocCons(x, y), z):
                elts = LL(m, x, LL(m, y, z))
            case LL(_, DocText(s), z):
                w -= len(s)
                elts = z
            case LL(Mode.FLAT, DocBreak(s), z):
                w -= len(s)
                elts = z
            case LL(Mode.FILL, DocBreak(_), _):
                return True
            case LL(_, DocGroup(_, x), z):
                elts = LL(Mode.FLAT, x, z)
            case _:  # pragma: no cover
                assert False, elts
    return False


def format(w: int, k: int, elts: LL | None, out: TextIO) -> None:
    """Write the work list *elts* to *out*.

    *k* is the number of characters already written on the current line.
    """
    stext = out.write

    while elts is not None:
        match elts:
            case LL(_, DocNil(), z):
                elts = z
            case LL(m, DocCons(x, y), z):
                elts = LL(m, x, LL(m, y, z))
            case LL(_, DocText(s), z) | LL(Mode.FLAT, DocBreak(s), z):
                stext(s)
                k += len(s)
                elts = z
            case LL(Mode.FILL, DocBreak(s), z) if fits(w - k - len(s), z):
                stext(s)
                k += len(s)
                elts = z
            case LL(Mode.FILL, DocBreak(_), z):
                stext("\n")
                k = 0
                elts = z
            case LL(_, DocGroup(m, x), z):
                elts = LL(m, x, z)
            case _:  # pragma: no cover
                assert False, elts


def to_string(width: int, doc: Doc) -> str:
    out = io.StringIO()
    format(width, 0, LL(Mode.FLAT, doc), out)
    return out.getvalue()
