"""``yamldump.dumper``: Tree serialisation
=======================================

Turn a python value into a YAML document.

  >>> print(dump({"name": "yamldump", "tags": ["yaml", "dump"]}), end="")
  name: yamldump
  tags:
    - yaml
    - dump

Containers referenced more than once are written once and then aliased:

  >>> point = {"x": 1, "y": 2}
  >>> print(dump([point, point]), end="")
  - &ref_0
    x: 1
    y: 2
  - *ref_0

*flow_level* controls the depth at which collections switch to the inline
("flow") style:

  >>> print(dump({"a": [1, 2], "b": {"c": "d"}}, flow_level=1), end="")
  a: [1, 2]
  b: {c: d}

"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Final, Mapping, TypeAlias

from yamldump import scalar
from yamldump.anchors import DuplicateRegistry
from yamldump.errors import ConfigurationError, UnsupportedValueError
from yamldump.schema import (
    DEFAULT_SCHEMA,
    DirectConverter,
    Schema,
    StyleTable,
    Tagged,
    expand_tag,
)

__all__ = ("Dumper", "dump")

logger = logging.getLogger(__name__)

KeyComparator: TypeAlias = Callable[[Any, Any], int]

#: Tag used for values resolved by an implicit type (they are written as is)
IMPLICIT: Final = "?"

# Keys longer than this must be written as explicit ("? key") pairs
MAX_SIMPLE_KEY_LENGTH: Final = 1024


def _next_line(indent: int, level: int) -> str:
    return "\n" + " " * (indent * level)


def _compile_style_map(styles: Mapping[str, str] | None) -> dict[str, str]:
    if styles is None:
        return {}
    return {expand_tag(tag): str(style) for tag, style in styles.items()}


def _unsupported(v: Any) -> UnsupportedValueError:
    return UnsupportedValueError(
        f"unacceptable kind of an object to dump {type(v).__name__!r}"
    )


class Dumper:
    """Serialisation context of a single document.

    The context owns the registry of duplicated containers, an instance should
    not be shared between concurrent calls to :meth:`stringify`.

    Args:
      indent: Number of spaces per indentation level (at least 1).
      array_indent: When false, block sequences nested in a mapping are not
        indented relative to their key.
      skip_invalid: Silently drop the values the schema cannot write (and the
        pair or the element that contains them) instead of raising
        :class:`~yamldump.UnsupportedValueError`.
      flow_level: Nesting level from which collections are written in flow
        style. ``-1`` means block style everywhere.
      styles: Style to use for a given tag (e.g. ``{"!!int": "hexadecimal"}``).
      schema: The types the dumper knows how to write.
      sort_keys: ``True`` to sort mapping keys, or a function comparing two
        keys (returning a negative number, zero or a positive number).
      line_width: Preferred maximum line width. ``-1`` means unlimited.
      use_anchors: Write containers that appear several times as anchors and
        aliases. When false, they are written in full every time (recursive
        values are then not supported).
      compat_mode: Quote strings that YAML 1.1 readers would interpret as
        booleans (``yes``, ``no``, ``on``...).
      condense_flow: Omit the spaces in flow collections (``[a,b]``,
        ``{"a":b}``).
    """

    schema: Schema
    indent: int
    array_indent: bool
    skip_invalid: bool
    flow_level: int
    styles: dict[str, str]
    key_sorter: Callable[[list[Any]], list[Any]] | None
    line_width: int
    use_anchors: bool
    compat_mode: bool
    condense_flow: bool
    duplicates: DuplicateRegistry

    def __init__(
        self,
        *,
        indent: int = 2,
        array_indent: bool = True,
        skip_invalid: bool = False,
        flow_level: int = -1,
        styles: Mapping[str, str] | None = None,
        schema: Schema = DEFAULT_SCHEMA,
        sort_keys: bool | KeyComparator | None = False,
        line_width: int = 80,
        use_anchors: bool = True,
        compat_mode: bool = True,
        condense_flow: bool = False,
    ) -> None:
        self.schema = schema
        self.indent = max(1, indent)
        self.array_indent = array_indent
        self.skip_invalid = skip_invalid
        self.flow_level = flow_level
        self.styles = _compile_style_map(styles)
        self.key_sorter = self._make_key_sorter(sort_keys)
        self.line_width = line_width
        self.use_anchors = use_anchors
        self.compat_mode = compat_mode
        self.condense_flow = condense_flow
        self.duplicates = DuplicateRegistry()

    @staticmethod
    def _make_key_sorter(
        sort_keys: bool | KeyComparator | None,
    ) -> Callable[[list[Any]], list[Any]] | None:
        if sort_keys is True:
            return functools.partial(sorted, key=str)
        if callable(sort_keys):
            return functools.partial(
                sorted, key=functools.cmp_to_key(sort_keys)
            )
        if not sort_keys:
            return None
        raise ConfigurationError("sort_keys must be a boolean or a function")

    def stringify_scalar(self, string: str, level: int, is_key: bool) -> str:
        return scalar.encode_scalar(
            string,
            level,
            is_key,
            indent=self.indent,
            line_width=self.line_width,
            flow_level=self.flow_level,
            compat_mode=self.compat_mode,
            is_ambiguous=self.schema.is_ambiguous,
        )

    def stringify_flow_sequence(
        self, seq: list[Any] | tuple[Any, ...], level: int, is_key: bool
    ) -> str:
        sep = "," if self.condense_flow else ", "
        items = []
        for elt in seq:
            # Write only valid elements.
            s = self.stringify_node(
                level, elt, block=False, compact=False, is_key=is_key
            )
            if s is not None:
                items.append(s)
        return "[" + sep.join(items) + "]"

    def stringify_block_sequence(
        self, seq: list[Any] | tuple[Any, ...], level: int, compact: bool
    ) -> str:
        out = []
        for elt in seq:
            # Write only valid elements.
            s = self.stringify_node(
                level + 1, elt, block=True, compact=True, is_key=False
            )
            if s is None:
                continue
            if not compact or out:
                out.append(_next_line(self.indent, level))
            out.append("-" if s.startswith("\n") else "- ")
            out.append(s)
        # Empty sequence if no valid values.
        return "".join(out) or "[]"

    def stringify_flow_mapping(
        self, obj: Mapping[Any, Any], level: int
    ) -> str:
        sep = "," if self.condense_flow else ", "
        pairs = []
        for key, value in obj.items():
            if self.condense_flow and isinstance(key, str):
                # A quoted key can be followed by a bare ":", `{a:b}` would be
                # read back as the single key "a:b"
                key_str: str | None = '"' + scalar.escape_string(key) + '"'
                colon = ":"
            else:
                key_str = self.stringify_node(
                    level, key, block=False, compact=False, is_key=True
                )
                colon = ": "
            if key_str is None:
                # Skip this pair because of invalid key.
                continue
            value_str = self.stringify_node(
                level, value, block=False, compact=False, is_key=False
            )
            if value_str is None:
                # Skip this pair because of invalid value.
                continue
            explicit = "? " if len(key_str) > MAX_SIMPLE_KEY_LENGTH else ""
            pairs.append(explicit + key_str + colon + value_str)
        return "{" + sep.join(pairs) + "}"

    def stringify_block_mapping(
        self,
        obj: Mapping[Any, Any],
        tag: str | None,
        level: int,
        compact: bool,
    ) -> str:
        keys = list(obj)
        # Allow sorting keys so that the output is deterministic
        if self.key_sorter is not None:
            keys = self.key_sorter(keys)

        out = []
        for key in keys:
            key_str = self.stringify_node(
                level + 1, key, block=False, compact=True, is_key=True
            )
            if key_str is None:
                # Skip this pair because of invalid key.
                continue

            explicit_pair = (tag is not None and tag != IMPLICIT) or len(
                key_str
            ) > MAX_SIMPLE_KEY_LENGTH

            value_str = self.stringify_node(
                level + 1,
                obj[key],
                block=True,
                compact=explicit_pair,
                is_key=False,
            )
            if value_str is None:
                # Skip this pair because of invalid value.
                continue

            if not compact or out:
                out.append(_next_line(self.indent, level))
            if explicit_pair:
                out.append("?" if key_str.startswith("\n") else "? ")
            out.append(key_str)
            if explicit_pair:
                out.append(_next_line(self.indent, level))
            out.append(":" if value_str.startswith("\n") else ": ")
            out.append(value_str)

        # Empty mapping if no valid pairs.
        return "".join(out) or "{}"

    def detect_type(self, obj: Any, explicit: bool) -> tuple[str, Any] | None:
        """Find the type of *obj* and convert it to a printable value.

        Returns the tag (:const:`IMPLICIT` for implicit types) and the
        converted value, or ``None`` if no type matches.
        """
        types = self.schema.explicit if explicit else self.schema.implicit
        for ty in types:
            if ty.predicate is None or not ty.predicate(obj):
                continue
            tag = ty.tag if explicit else IMPLICIT
            style = self.styles.get(ty.tag) or ty.default_style
            match ty.represent:
                case None:
                    return tag, obj
                case DirectConverter(fn):
                    return tag, fn(obj, style)
                case StyleTable(table) if style in table:
                    return tag, table[style](obj, style)
                case StyleTable():
                    raise ConfigurationError(
                        f"!<{ty.tag}> tag resolver accepts not {style!r} style"
                    )
        return None

    def _resolve(self, obj: Any) -> tuple[str | None, Any]:
        if isinstance(obj, Tagged):
            _, value = self._resolve(obj.value)
            return obj.tag, value
        detected = self.detect_type(obj, explicit=False) or self.detect_type(
            obj, explicit=True
        )
        if detected is None:
            return None, obj
        return detected

    def stringify_node(
        self,
        level: int,
        obj: Any,
        *,
        block: bool,
        compact: bool,
        is_key: bool,
    ) -> str | None:
        """Serialise *obj* at nesting *level*.

        Returns ``None`` if the value is invalid and :attr:`skip_invalid` is
        set.

        Args:
          block: Use the block style for collections (if the flow level
            allows it).
          compact: Don't start the collection with a newline (e.g. a mapping
            in a sequence starts on the same line as the ``-``).
          is_key: *obj* is a mapping key.
        """
        tag, obj = self._resolve(obj)
        explicit_tag = tag is not None and tag != IMPLICIT

        if block:
            block = self.flow_level < 0 or self.flow_level > level

        duplicate_index = None
        if isinstance(obj, dict | list):
            duplicate_index = self.duplicates.index(obj)
        duplicate = duplicate_index is not None

        if explicit_tag or duplicate or (self.indent != 2 and level > 0):
            compact = False

        if duplicate:
            if self.duplicates.is_used(obj):
                return f"*ref_{duplicate_index}"
            self.duplicates.mark_used(obj)

        res: str
        if isinstance(obj, dict):
            if block and obj:
                res = self.stringify_block_mapping(obj, tag, level, compact)
                if duplicate:
                    res = f"&ref_{duplicate_index}{res}"
            else:
                res = self.stringify_flow_mapping(obj, level)
                if duplicate:
                    res = f"&ref_{duplicate_index} {res}"
        elif isinstance(obj, list | tuple):
            array_level = (
                level - 1 if not self.array_indent and level > 0 else level
            )
            if block and obj:
                res = self.stringify_block_sequence(obj, array_level, compact)
                if duplicate:
                    res = f"&ref_{duplicate_index}{res}"
            else:
                res = self.stringify_flow_sequence(obj, level, is_key)
                if duplicate:
                    res = f"&ref_{duplicate_index} {res}"
        elif isinstance(obj, str):
            res = (
                obj
                if tag == IMPLICIT
                else self.stringify_scalar(obj, level, is_key)
            )
        elif self.skip_invalid:
            logger.debug("Skipping value of type %s", type(obj).__name__)
            return None
        else:
            raise _unsupported(obj)

        if explicit_tag:
            sep = "" if res.startswith("\n") else " "
            res = f"!<{tag}>{sep}{res}"
        return res

    def stringify(self, obj: Any) -> str:
        """Serialise *obj* as a YAML document.

        Returns the empty string if *obj* itself is invalid and
        :attr:`skip_invalid` is set.
        """
        if self.use_anchors:
            self.duplicates = DuplicateRegistry.scan(obj)
            logger.debug(
                "Found %d duplicated containers", len(self.duplicates)
            )
        else:
            self.duplicates = DuplicateRegistry()
        res = self.stringify_node(
            0, obj, block=True, compact=True, is_key=False
        )
        if res is None:
            return ""
        return res + "\n"


def dump(
    obj: Any,
    *,
    indent: int = 2,
    array_indent: bool = True,
    skip_invalid: bool = False,
    flow_level: int = -1,
    styles: Mapping[str, str] | None = None,
    schema: Schema = DEFAULT_SCHEMA,
    sort_keys: bool | KeyComparator | None = False,
    line_width: int = 80,
    use_anchors: bool = True,
    compat_mode: bool = True,
    condense_flow: bool = False,
) -> str:
    """Serialise *obj* as a YAML document.

    The result always ends with exactly one newline (unless it is empty). See
    :class:`Dumper` for a description of the arguments.

      >>> print(dump({"b": 1, "a": None}, sort_keys=True), end="")
      a: null
      b: 1
      >>> dump(["yes", "0x1F", "café"], flow_level=0)
      "['yes', '0x1F', café]\\n"

    """
    return Dumper(
        indent=indent,
        array_indent=array_indent,
        skip_invalid=skip_invalid,
        flow_level=flow_level,
        styles=styles,
        schema=schema,
        sort_keys=sort_keys,
        line_width=line_width,
        use_anchors=use_anchors,
        compat_mode=compat_mode,
        condense_flow=condense_flow,
    ).stringify(obj)
