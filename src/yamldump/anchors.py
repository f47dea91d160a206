"""``yamldump.anchors``: Shared reference detection
================================================

Before writing a tree we walk it to find the containers that can be reached
through more than one path. Those are written once with an anchor
(``&ref_N``) and then referred to via an alias (``*ref_N``).

    >>> shared = [1, 2]
    >>> registry = DuplicateRegistry.scan({"a": shared, "b": shared, "c": []})
    >>> registry.index(shared), len(registry)
    (0, 1)

Only mutable containers (:class:`dict` and :class:`list`) are tracked: the
interpreter is free to share immutable values (e.g. the empty tuple) between
unrelated parts of a tree.
"""
from __future__ import annotations

from typing import Any, Iterator

from yamldump.schema import Tagged

__all__ = ("DuplicateRegistry",)


class DuplicateRegistry:
    """Identity keyed set of the duplicated containers of a tree.

    It also keeps track of which duplicates were already written (the "used"
    set).
    """

    # id -> position of the duplicate
    positions: dict[int, int]
    used: set[int]
    # Since we rely on `id` to detect duplicates we have to hold on to the
    # objects to make sure addresses do not get reused
    objects: list[Any]

    def __init__(self) -> None:
        self.positions = {}
        self.used = set()
        self.objects = []

    @classmethod
    def scan(cls, root: Any) -> DuplicateRegistry:
        """Build the registry of all the containers seen twice in *root*.

        A container seen a second time isn't visited again; this is also what
        makes the walk terminate on recursive values.
        """
        registry = cls()
        visited: dict[int, Any] = {}

        def visit(v: Any) -> None:
            if isinstance(v, Tagged):
                visit(v.value)
                return
            if isinstance(v, tuple):
                for elt in v:
                    visit(elt)
                return
            if not isinstance(v, dict | list):
                return
            addr = id(v)
            if addr in visited:
                registry._add(v)
                return
            visited[addr] = v
            for elt in v.values() if isinstance(v, dict) else v:
                visit(elt)

        visit(root)
        return registry

    def _add(self, v: Any) -> None:
        addr = id(v)
        if addr not in self.positions:
            self.positions[addr] = len(self.objects)
            self.objects.append(v)

    def index(self, v: Any) -> int | None:
        """Position of *v* in the registry (``None`` if not duplicated)."""
        return self.positions.get(id(v))

    def is_used(self, v: Any) -> bool:
        return id(v) in self.used

    def mark_used(self, v: Any) -> None:
        self.used.add(id(v))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.objects)
