"""Load Objects and arbitrary resource documents from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from kubeobject.api import API_VERSION, KIND
from kubeobject.api.types import Object
from kubeobject.errors import KubeObjectError

logger = logging.getLogger(__name__)


class LoadError(KubeObjectError):
    """A file could not be read or parsed."""


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted timestamps as strings, as Kubernetes does."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_documents(path: str | Path) -> list[dict]:
    """Load every YAML document in ``path``, skipping empty ones."""
    path = Path(path)
    try:
        with open(path) as f:
            docs = [d for d in yaml.load_all(f, Loader=_ManifestLoader) if d is not None]
    except OSError as e:
        raise LoadError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise LoadError(f"Invalid YAML in {path}: {e}") from e

    for i, doc in enumerate(docs):
        if not isinstance(doc, dict):
            raise LoadError(f"{path}: document {i + 1} is not a mapping")

    logger.debug("Loaded %d document(s) from %s", len(docs), path)
    return docs


def is_object(document: dict) -> bool:
    return document.get("apiVersion") == API_VERSION and document.get("kind") == KIND


def load_objects(path: str | Path) -> list[Object]:
    """Load the Object documents in ``path``; other kinds are ignored."""
    return [Object.from_dict(doc) for doc in load_documents(path) if is_object(doc)]


def load_object(path: str | Path) -> Object:
    """Load exactly one Object from ``path``."""
    objects = load_objects(path)
    if len(objects) != 1:
        raise LoadError(f"{path}: expected exactly one {KIND}, found {len(objects)}")
    return objects[0]
