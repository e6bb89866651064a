"""Field path parsing.

A field path addresses a node inside a JSON-like document:

    spec.containers[0].name
    metadata.labels[app.kubernetes.io/name]

Dots separate object keys. Brackets hold either an array index (a
non-negative integer) or an object key that may itself contain dots.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kubeobject.errors import InvalidPathError


class SegmentType(Enum):
    FIELD = "field"
    INDEX = "index"


@dataclass(frozen=True)
class Segment:
    """One step of a field path."""

    type: SegmentType
    field: str = ""
    index: int = 0

    def __str__(self) -> str:
        if self.type == SegmentType.INDEX:
            return f"[{self.index}]"
        return self.field


def field(name: str) -> Segment:
    return Segment(type=SegmentType.FIELD, field=name)


def index(i: int) -> Segment:
    return Segment(type=SegmentType.INDEX, index=i)


def parse(path: str) -> list[Segment]:
    """Parse a field path into segments.

    Raises InvalidPathError for empty paths, empty keys, unbalanced
    brackets, or characters following a closing bracket other than
    '.' or '['.
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path or ""), "field path must be a non-empty string")

    segments: list[Segment] = []
    buf = ""
    pos = 0
    after_bracket = False

    while pos < len(path):
        ch = path[pos]

        if ch == ".":
            if buf:
                segments.append(field(buf))
                buf = ""
            elif not after_bracket:
                raise InvalidPathError(path, f"unexpected '.' at position {pos}")
            after_bracket = False
            pos += 1
            if pos == len(path):
                raise InvalidPathError(path, "path must not end with '.'")
            continue

        if ch == "[":
            if buf:
                segments.append(field(buf))
                buf = ""
            end = path.find("]", pos + 1)
            if end == -1:
                raise InvalidPathError(path, f"unterminated '[' at position {pos}")
            content = path[pos + 1:end]
            if not content:
                raise InvalidPathError(path, f"empty brackets at position {pos}")
            segments.append(_bracket_segment(content))
            pos = end + 1
            if pos < len(path) and path[pos] not in ".[":
                raise InvalidPathError(
                    path, f"unexpected {path[pos]!r} after ']' at position {pos}"
                )
            after_bracket = True
            continue

        if ch == "]":
            raise InvalidPathError(path, f"unexpected ']' at position {pos}")

        buf += ch
        pos += 1

    if buf:
        segments.append(field(buf))

    return segments


def join(segments: list[Segment]) -> str:
    """Render segments back into a field path string."""
    out = ""
    for seg in segments:
        if seg.type == SegmentType.INDEX:
            out += f"[{seg.index}]"
        elif "." in seg.field or "[" in seg.field or "]" in seg.field:
            out += f"[{seg.field}]"
        elif out:
            out += f".{seg.field}"
        else:
            out = seg.field
    return out


def _bracket_segment(content: str) -> Segment:
    if content.isascii() and content.isdigit():
        return index(int(content))
    return field(content)
