"""In-memory resource resolver.

Resolves dependsOn / patchesFrom descriptors against a fixed set of
documents, e.g. the ones loaded from YAML by the CLI. A live controller
resolves against the cluster instead.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from kubeobject.api.types import DependsOn
from kubeobject.errors import ReferenceNotFoundError

logger = logging.getLogger(__name__)


class LocalResolver:
    """Looks up documents by apiVersion, kind, namespace and name."""

    def __init__(self, documents: Iterable[Any] = ()):
        self._index: dict[tuple[str, str, str, str], Any] = {}
        for doc in documents:
            self.add(doc)

    def __len__(self) -> int:
        return len(self._index)

    def add(self, document: Any) -> None:
        """Index a document (a mapping or anything with ``to_dict``)."""
        data = document.to_dict() if hasattr(document, "to_dict") else document
        metadata = data.get("metadata") or {}
        key = (
            data.get("apiVersion", ""),
            data.get("kind", ""),
            metadata.get("namespace", ""),
            metadata.get("name", ""),
        )
        if key in self._index:
            logger.warning("Duplicate document %s replaces an earlier one", key)
        self._index[key] = document

    def resolve(self, depends_on: DependsOn) -> Any:
        try:
            document = self._index[depends_on.key]
        except KeyError:
            raise ReferenceNotFoundError(
                f"{depends_on.kind} {_display_name(depends_on)} "
                f"({depends_on.api_version}) not found"
            ) from None
        logger.debug("Resolved %s", depends_on.key)
        return document


def _display_name(depends_on: DependsOn) -> str:
    if depends_on.namespace:
        return f"{depends_on.namespace}/{depends_on.name}"
    return depends_on.name
