"""Paved documents: uniformly addressable JSON-like trees.

Paving turns a typed object or a mapping into a plain tree of dicts and
lists that can be read and written by field path.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from kubeobject.errors import ConversionError, InvalidPathError, NotFoundError
from kubeobject.fieldpath.parse import Segment, SegmentType, join, parse

_SCALARS = (str, int, float, bool, type(None))


class Paved:
    """A JSON-like object addressable by field path."""

    def __init__(self, content: dict):
        if not isinstance(content, dict):
            raise ConversionError("", f"cannot pave {type(content).__name__}, expected an object")
        self._content = content

    def unstructured_content(self) -> dict:
        return self._content

    def get_value(self, path: str) -> Any:
        """Return a copy of the value at ``path``.

        Raises NotFoundError when a key or index along the path is absent,
        InvalidPathError when the path is malformed or runs through a scalar.
        """
        segments = parse(path)
        node: Any = self._content

        for i, seg in enumerate(segments):
            where = join(segments[: i + 1])
            if node is None:
                raise NotFoundError(where)

            if seg.type == SegmentType.INDEX:
                if not isinstance(node, list):
                    raise InvalidPathError(join(segments[:i]), "not an array")
                if seg.index >= len(node):
                    raise NotFoundError(where, "index out of bounds")
                node = node[seg.index]
            else:
                if not isinstance(node, dict):
                    raise InvalidPathError(join(segments[:i]), "not an object")
                if seg.field not in node:
                    raise NotFoundError(where)
                node = node[seg.field]

        return copy.deepcopy(node)

    def set_value(self, path: str, value: Any) -> None:
        """Write a copy of ``value`` at ``path``, creating intermediate nodes.

        Arrays are padded with None up to the written index.
        """
        segments = parse(path)
        node: Any = self._content

        for i, seg in enumerate(segments[:-1]):
            empty = [] if segments[i + 1].type == SegmentType.INDEX else {}
            node = _step(node, seg, empty, segments, i)

        _assign(node, segments[-1], copy.deepcopy(value), segments)


def pave(obj: Any) -> Paved:
    """Pave a typed object (anything with ``to_dict``) or a mapping.

    The returned tree is a copy; writing to it never touches ``obj``.
    """
    if hasattr(obj, "to_dict"):
        return Paved(obj.to_dict())
    if isinstance(obj, Mapping):
        return Paved(copy.deepcopy(dict(obj)))
    raise ConversionError("", f"cannot pave {type(obj).__name__}")


def to_unstructured(value: Any, location: str = "") -> Any:
    """Check that ``value`` is JSON-compatible and return a copy of it.

    Raises ConversionError naming the first offending location.
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        out = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ConversionError(location, f"object key {key!r} is not a string")
            out[key] = to_unstructured(item, f"{location}.{key}" if location else key)
        return out
    if isinstance(value, (list, tuple)):
        return [to_unstructured(item, f"{location}[{i}]") for i, item in enumerate(value)]
    raise ConversionError(location, f"unsupported value type {type(value).__name__}")


def _step(node: Any, seg: Segment, empty: Any, segments: list[Segment], i: int) -> Any:
    if seg.type == SegmentType.INDEX:
        if not isinstance(node, list):
            raise InvalidPathError(join(segments[:i]), "not an array")
        _pad(node, seg.index)
        if node[seg.index] is None:
            node[seg.index] = empty
        return node[seg.index]

    if not isinstance(node, dict):
        raise InvalidPathError(join(segments[:i]), "not an object")
    if node.get(seg.field) is None:
        node[seg.field] = empty
    return node[seg.field]


def _assign(node: Any, seg: Segment, value: Any, segments: list[Segment]) -> None:
    parent = join(segments[:-1])
    if seg.type == SegmentType.INDEX:
        if not isinstance(node, list):
            raise InvalidPathError(parent, "not an array")
        _pad(node, seg.index)
        node[seg.index] = value
        return

    if not isinstance(node, dict):
        raise InvalidPathError(parent, "not an object")
    node[seg.field] = value


def _pad(node: list, idx: int) -> None:
    if idx >= len(node):
        node.extend([None] * (idx + 1 - len(node)))
