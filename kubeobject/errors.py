"""Error types raised by the reference model, patch engine and resolver."""

from __future__ import annotations


class KubeObjectError(Exception):
    """Base class for all kubeobject errors."""


class FieldPathError(KubeObjectError):
    """A field path could not be read or written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class NotFoundError(FieldPathError):
    """The field path does not exist in the document."""

    def __init__(self, path: str, message: str = "no such field"):
        super().__init__(path, message)


class InvalidPathError(FieldPathError):
    """The field path is malformed or traverses a non-container node."""


class ConversionError(KubeObjectError):
    """A document could not be converted into its typed representation."""

    def __init__(self, location: str, message: str):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class ReferenceNotFoundError(KubeObjectError):
    """A referenced resource is not known to the resolver."""
