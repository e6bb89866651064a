"""Typed data model for the Object managed resource.

Covers: management policy, references (dependsOn / patchesFrom), the opaque
manifest wrappers, the common managed-resource fields, and the Object itself.
Every type converts to and from its camelCase wire form; ``from_dict`` raises
ConversionError when a value has the wrong shape.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kubeobject.api import API_VERSION, KIND
from kubeobject.errors import ConversionError
from kubeobject.fieldpath import to_unstructured
from kubeobject.policy import ManagementPolicy


class DeletionPolicy(Enum):
    """What happens to the external resource when the Object is deleted."""

    DELETE = "Delete"
    ORPHAN = "Orphan"


# --- References ---


@dataclass
class DependsOn:
    """Identifies another Object or arbitrary Kubernetes resource.

    An unqualified reference points at another Object.
    """

    name: str
    api_version: str = API_VERSION
    kind: str = KIND
    namespace: str = ""
    block_owner_deletion: bool | None = None

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.api_version, self.kind, self.namespace, self.name)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
        }
        if self.namespace:
            data["namespace"] = self.namespace
        if self.block_owner_deletion is not None:
            data["blockOwnerDeletion"] = self.block_owner_deletion
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "dependsOn") -> DependsOn:
        return cls(**_descriptor_fields(data, location))


@dataclass
class PatchesFrom(DependsOn):
    """A dependency that also copies the value at ``field_path``."""

    field_path: str | None = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field_path is not None:
            data["fieldPath"] = self.field_path
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "patchesFrom") -> PatchesFrom:
        fields = _descriptor_fields(data, location)
        fields["field_path"] = _opt(data, "fieldPath", str, location)
        return cls(**fields)


@dataclass
class Reference:
    """A relationship to another resource, optionally copying a value from it.

    ``to_field_path`` is relative to the manifest; when unset, patches land
    on the same path they were read from.
    """

    depends_on: DependsOn | None = None
    patches_from: PatchesFrom | None = None
    to_field_path: str | None = None

    @property
    def target(self) -> DependsOn | None:
        """The referenced resource, preferring patchesFrom."""
        return self.patches_from or self.depends_on

    @property
    def is_patch(self) -> bool:
        return self.patches_from is not None

    def apply_from_field_path_patch(self, source: Any, destination: Any) -> Any:
        """Patch ``destination`` with the value at patchesFrom.fieldPath in ``source``.

        Defaults ``to_field_path`` to patchesFrom.fieldPath before reading the
        source, so the default is recorded even when the patch then fails.
        Returns the patched destination.
        """
        from kubeobject.patch import apply_field_path_patch

        if self.to_field_path is None and self.patches_from is not None:
            self.to_field_path = self.patches_from.field_path
        return apply_field_path_patch(self, source, destination).destination

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.depends_on is not None:
            data["dependsOn"] = self.depends_on.to_dict()
        if self.patches_from is not None:
            data["patchesFrom"] = self.patches_from.to_dict()
        if self.to_field_path is not None:
            data["toFieldPath"] = self.to_field_path
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "reference") -> Reference:
        _mapping(data, location)
        depends_on = data.get("dependsOn")
        patches_from = data.get("patchesFrom")
        return cls(
            depends_on=(
                DependsOn.from_dict(depends_on, f"{location}.dependsOn")
                if depends_on is not None
                else None
            ),
            patches_from=(
                PatchesFrom.from_dict(patches_from, f"{location}.patchesFrom")
                if patches_from is not None
                else None
            ),
            to_field_path=_opt(data, "toFieldPath", str, location),
        )


# --- Manifest wrappers ---


@dataclass
class ObjectParameters:
    """Desired state: the raw manifest of the Kubernetes object to create."""

    manifest: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"manifest": copy.deepcopy(self.manifest)}

    @classmethod
    def from_dict(cls, data: Any, location: str = "spec.forProvider") -> ObjectParameters:
        return cls(manifest=_manifest(data, location))


@dataclass
class ObjectObservation:
    """Observed state: the raw manifest of the remote object."""

    manifest: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"manifest": copy.deepcopy(self.manifest)} if self.manifest else {}

    @classmethod
    def from_dict(cls, data: Any, location: str = "status.atProvider") -> ObjectObservation:
        return cls(manifest=_manifest(data, location))


# --- Managed resource plumbing ---


@dataclass
class ProviderConfigReference:
    name: str = "default"


@dataclass
class SecretReference:
    name: str
    namespace: str


@dataclass
class Condition:
    """An observed condition of the managed resource (e.g. Ready, Synced)."""

    type: str
    status: str  # True | False | Unknown
    reason: str = ""
    message: str = ""
    last_transition_time: str = ""  # RFC 3339

    def to_dict(self) -> dict:
        data = {"type": self.type, "status": self.status}
        if self.reason:
            data["reason"] = self.reason
        if self.message:
            data["message"] = self.message
        if self.last_transition_time:
            data["lastTransitionTime"] = self.last_transition_time
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "condition") -> Condition:
        _mapping(data, location)
        return cls(
            type=_opt(data, "type", str, location, ""),
            status=_opt(data, "status", str, location, ""),
            reason=_opt(data, "reason", str, location, ""),
            message=_opt(data, "message", str, location, ""),
            last_transition_time=_opt(data, "lastTransitionTime", str, location, ""),
        )


# --- Spec / Status ---


@dataclass
class ObjectSpec:
    """Desired state of an Object."""

    for_provider: ObjectParameters = field(default_factory=ObjectParameters)
    management_policy: ManagementPolicy = ManagementPolicy.DEFAULT
    references: list[Reference] = field(default_factory=list)
    deletion_policy: DeletionPolicy = DeletionPolicy.DELETE
    provider_config_ref: ProviderConfigReference = field(default_factory=ProviderConfigReference)
    write_connection_secret_to_ref: SecretReference | None = None

    def patch_references(self) -> list[Reference]:
        """References that copy a value, in declaration order."""
        return [r for r in self.references if r.is_patch]

    def dependencies(self) -> list[DependsOn]:
        """Every resource this Object depends on, in declaration order."""
        return [r.target for r in self.references if r.target is not None]

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "deletionPolicy": self.deletion_policy.value,
            "providerConfigRef": {"name": self.provider_config_ref.name},
            "managementPolicy": self.management_policy.value,
        }
        if self.write_connection_secret_to_ref is not None:
            data["writeConnectionSecretToRef"] = {
                "name": self.write_connection_secret_to_ref.name,
                "namespace": self.write_connection_secret_to_ref.namespace,
            }
        if self.references:
            data["references"] = [r.to_dict() for r in self.references]
        data["forProvider"] = self.for_provider.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "spec") -> ObjectSpec:
        _mapping(data, location)

        references = _opt(data, "references", list, location, [])
        policy = _opt(data, "managementPolicy", str, location)
        deletion = _opt(data, "deletionPolicy", str, location, DeletionPolicy.DELETE.value)
        try:
            deletion_policy = DeletionPolicy(deletion)
        except ValueError:
            raise ConversionError(
                f"{location}.deletionPolicy", f"unknown deletion policy {deletion!r}"
            ) from None

        provider_ref = _opt(data, "providerConfigRef", dict, location, {})
        secret_ref = _opt(data, "writeConnectionSecretToRef", dict, location)
        for_provider = data.get("forProvider")

        return cls(
            for_provider=(
                ObjectParameters.from_dict(for_provider, f"{location}.forProvider")
                if for_provider is not None
                else ObjectParameters()
            ),
            management_policy=ManagementPolicy(policy) if policy else ManagementPolicy.DEFAULT,
            references=[
                Reference.from_dict(r, f"{location}.references[{i}]")
                for i, r in enumerate(references)
            ],
            deletion_policy=deletion_policy,
            provider_config_ref=ProviderConfigReference(
                name=_opt(provider_ref, "name", str, f"{location}.providerConfigRef", "default"),
            ),
            write_connection_secret_to_ref=(
                SecretReference(
                    name=_opt(secret_ref, "name", str, f"{location}.writeConnectionSecretToRef", ""),
                    namespace=_opt(
                        secret_ref, "namespace", str, f"{location}.writeConnectionSecretToRef", ""
                    ),
                )
                if secret_ref is not None
                else None
            ),
        )


@dataclass
class ObjectStatus:
    """Observed state of an Object."""

    at_provider: ObjectObservation = field(default_factory=ObjectObservation)
    conditions: list[Condition] = field(default_factory=list)

    def condition(self, condition_type: str) -> Condition | None:
        for c in self.conditions:
            if c.type == condition_type:
                return c
        return None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.conditions:
            data["conditions"] = [c.to_dict() for c in self.conditions]
        at_provider = self.at_provider.to_dict()
        if at_provider:
            data["atProvider"] = at_provider
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "status") -> ObjectStatus:
        _mapping(data, location)
        at_provider = data.get("atProvider")
        conditions = _opt(data, "conditions", list, location, [])
        return cls(
            at_provider=(
                ObjectObservation.from_dict(at_provider, f"{location}.atProvider")
                if at_provider is not None
                else ObjectObservation()
            ),
            conditions=[
                Condition.from_dict(c, f"{location}.conditions[{i}]")
                for i, c in enumerate(conditions)
            ],
        )


# --- The Object ---


@dataclass
class Object:
    """The managed resource: a manifest to apply, plus references and policy.

    ``metadata`` is owned by the controller runtime and kept opaque.
    """

    metadata: dict = field(default_factory=dict)
    spec: ObjectSpec = field(default_factory=ObjectSpec)
    status: ObjectStatus = field(default_factory=ObjectStatus)
    api_version: str = API_VERSION
    kind: str = KIND

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "")

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.api_version, self.kind, self.namespace, self.name)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": copy.deepcopy(self.metadata),
            "spec": self.spec.to_dict(),
        }
        status = self.status.to_dict()
        if status:
            data["status"] = status
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Object:
        _mapping(data, "")
        metadata = _opt(data, "metadata", dict, "", {})
        spec = data.get("spec")
        status = data.get("status")
        return cls(
            metadata=to_unstructured(metadata, "metadata"),
            spec=ObjectSpec.from_dict(spec) if spec is not None else ObjectSpec(),
            status=ObjectStatus.from_dict(status) if status is not None else ObjectStatus(),
            api_version=_opt(data, "apiVersion", str, "", API_VERSION),
            kind=_opt(data, "kind", str, "", KIND),
        )


# --- Conversion helpers ---

_TYPE_NAMES = {str: "string", bool: "boolean", list: "array", dict: "object"}


def _mapping(data: Any, location: str) -> None:
    if not isinstance(data, dict):
        raise ConversionError(location, f"expected object, got {type(data).__name__}")


def _opt(data: dict, key: str, expected: type, location: str, default: Any = None) -> Any:
    """Read an optional key, treating null as absent."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, expected):
        where = f"{location}.{key}" if location else key
        raise ConversionError(
            where, f"expected {_TYPE_NAMES[expected]}, got {type(value).__name__}"
        )
    return value


def _descriptor_fields(data: Any, location: str) -> dict:
    _mapping(data, location)
    return {
        "name": _opt(data, "name", str, location, ""),
        # Empty strings are omitted on the wire, so they default too.
        "api_version": _opt(data, "apiVersion", str, location) or API_VERSION,
        "kind": _opt(data, "kind", str, location) or KIND,
        "namespace": _opt(data, "namespace", str, location, ""),
        "block_owner_deletion": _opt(data, "blockOwnerDeletion", bool, location),
    }


def _manifest(data: Any, location: str) -> dict:
    _mapping(data, location)
    manifest = _opt(data, "manifest", dict, location, {})
    return to_unstructured(manifest, f"{location}.manifest")
