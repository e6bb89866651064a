"""Field path addressing for JSON-like documents.

This package provides the document paving primitives the patch engine
builds on:
- Parsing: dotted keys, [N] array indices and [key] bracketed keys
- Paving: wrap a document so values can be read and written by path
- Conversion: check a tree is JSON-compatible before it is typed again
"""

from kubeobject.fieldpath.parse import Segment, SegmentType, join, parse
from kubeobject.fieldpath.paved import Paved, pave, to_unstructured

__all__ = [
    "Paved",
    "Segment",
    "SegmentType",
    "join",
    "parse",
    "pave",
    "to_unstructured",
]
