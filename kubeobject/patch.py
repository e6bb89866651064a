"""Patch engine: copy a value from one resource into another's manifest.

Given a reference carrying patchesFrom, the engine reads the value at
``fieldPath`` from the source document and writes it into the destination's
desired-state manifest (``spec.forProvider.manifest``) at ``toFieldPath``,
defaulting to the same path. Writes never reach metadata or status.

The engine never mutates its inputs: sources and destinations are paved
into private copies and the patched destination is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from kubeobject.api import MANIFEST_PATH
from kubeobject.api.types import Object, Reference
from kubeobject.errors import InvalidPathError
from kubeobject.fieldpath import Paved, join, parse, pave, to_unstructured

logger = logging.getLogger(__name__)

_MANIFEST_SEGMENTS = parse(MANIFEST_PATH)


@dataclass
class PatchResult:
    """Outcome of a single field path patch."""

    destination: Any
    to_field_path: str  # Relative to the manifest
    value: Any = None


def apply_field_path_patch(reference: Reference, source: Any, destination: Any) -> PatchResult:
    """Patch ``destination`` using the value at patchesFrom.fieldPath in ``source``.

    Args:
        reference: The reference to apply; must carry patchesFrom.fieldPath.
        source: The referenced resource, typed or as a mapping.
        destination: The Object being patched, typed or as a mapping.

    Returns:
        PatchResult with a patched copy of ``destination`` (same type) and
        the resolved destination path.

    Raises:
        NotFoundError: fieldPath does not exist in the source.
        InvalidPathError: a path is malformed or runs through a non-container.
        ConversionError: the patched document no longer fits its typed form.
    """
    patches_from = reference.patches_from
    if patches_from is None or patches_from.field_path is None:
        raise InvalidPathError("", "reference has no patchesFrom.fieldPath to read from")

    from_path = patches_from.field_path
    to_path = reference.to_field_path if reference.to_field_path is not None else from_path
    logger.debug("Resolved patch %r -> %r from %s", from_path, to_path, patches_from.key)

    value = pave(source).get_value(from_path)
    patched = patch_field_value_to_object(to_path, value, destination)

    logger.info(
        "Patched %s.%s from %s %s (%s)",
        MANIFEST_PATH,
        to_path,
        patches_from.kind,
        patches_from.name,
        from_path,
    )
    return PatchResult(destination=patched, to_field_path=to_path, value=value)


def patch_field_value_to_object(path: str, value: Any, to: Any) -> Any:
    """Write ``value`` at ``path`` inside the manifest of ``to``.

    The manifest is paved as its own root, so ``path`` can never escape it.
    Returns a converted copy of ``to``: typed objects go back through their
    ``from_dict``, mappings are checked for JSON compatibility.
    """
    content = pave(to).unstructured_content()

    manifest = Paved(_manifest_root(content))
    manifest.set_value(path, value)

    if hasattr(type(to), "from_dict"):
        return type(to).from_dict(content)
    return to_unstructured(content)


def apply_references(obj: Object, resolver: Any) -> Object:
    """Apply every patchesFrom reference of ``obj`` in declaration order.

    ``resolver`` must provide ``resolve(depends_on) -> document``. Plain
    dependsOn references only express ordering and are skipped here.
    """
    current = obj
    for ref in obj.spec.patch_references():
        source = resolver.resolve(ref.patches_from)
        current = apply_field_path_patch(ref, source, current).destination
    return current


def _manifest_root(content: dict) -> dict:
    """Return the manifest sub-tree of ``content``, creating it if absent."""
    node = content
    for i, seg in enumerate(_MANIFEST_SEGMENTS):
        child = node.get(seg.field)
        if child is None:
            child = node[seg.field] = {}
        elif not isinstance(child, dict):
            raise InvalidPathError(join(_MANIFEST_SEGMENTS[: i + 1]), "not an object")
        node = child
    return node
