"""JSON Schema for the Object managed resource.

This mirrors the OpenAPI v3 schema of the Object CRD: the wire contract for
references, management policies and the manifest wrappers. The manifest
itself is schema-less and preserved as-is.
"""

from kubeobject.api import API_VERSION, GROUP, KIND, VERSION
from kubeobject.policy import ManagementPolicy

_DEPENDS_ON_PROPERTIES: dict = {
    "apiVersion": {
        "type": "string",
        "default": API_VERSION,
        "description": "APIVersion of the referenced object.",
    },
    "kind": {
        "type": "string",
        "default": KIND,
        "description": "Kind of the referenced object.",
    },
    "name": {
        "type": "string",
        "minLength": 1,
        "description": "Name of the referenced object.",
    },
    "namespace": {
        "type": "string",
        "description": "Namespace of the referenced object.",
    },
    "blockOwnerDeletion": {
        "type": "boolean",
        "description": "BlockOwnerDeletion flag to support cascading forward deletion.",
    },
}

_MANIFEST: dict = {
    "type": "object",
    "x-kubernetes-embedded-resource": True,
    "x-kubernetes-preserve-unknown-fields": True,
}

OBJECT_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"https://{GROUP}/schema/{VERSION}/{KIND.lower()}",
    "title": f"{KIND} ({API_VERSION})",
    "description": (
        "A managed Kubernetes object whose manifest can be patched from "
        "other resources before it is applied."
    ),
    "type": "object",
    "required": ["apiVersion", "kind", "spec"],
    "properties": {
        "apiVersion": {"type": "string", "enum": [API_VERSION]},
        "kind": {"type": "string", "enum": [KIND]},
        "metadata": {"type": "object"},
        "spec": {
            "type": "object",
            "required": ["forProvider"],
            "properties": {
                "managementPolicy": {
                    "type": "string",
                    "default": ManagementPolicy.DEFAULT.value,
                    "enum": [p.value for p in ManagementPolicy.known()],
                },
                "deletionPolicy": {
                    "type": "string",
                    "default": "Delete",
                    "enum": ["Orphan", "Delete"],
                },
                "providerConfigRef": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}},
                },
                "writeConnectionSecretToRef": {
                    "type": "object",
                    "required": ["name", "namespace"],
                    "properties": {
                        "name": {"type": "string"},
                        "namespace": {"type": "string"},
                    },
                },
                "references": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "dependsOn": {
                                "type": "object",
                                "required": ["name"],
                                "properties": _DEPENDS_ON_PROPERTIES,
                            },
                            "patchesFrom": {
                                "type": "object",
                                "required": ["name", "fieldPath"],
                                "properties": {
                                    **_DEPENDS_ON_PROPERTIES,
                                    "fieldPath": {
                                        "type": "string",
                                        "minLength": 1,
                                        "description": (
                                            "Path of the field on the referenced "
                                            "object whose value is copied."
                                        ),
                                    },
                                },
                            },
                            "toFieldPath": {
                                "type": "string",
                                "description": (
                                    "Path inside the manifest that receives the value. "
                                    "Defaults to patchesFrom.fieldPath."
                                ),
                            },
                        },
                    },
                },
                "forProvider": {
                    "type": "object",
                    "required": ["manifest"],
                    "properties": {"manifest": _MANIFEST},
                },
            },
        },
        "status": {
            "type": "object",
            "properties": {
                "conditions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["type", "status"],
                        "properties": {
                            "type": {"type": "string"},
                            "status": {"type": "string", "enum": ["True", "False", "Unknown"]},
                            "reason": {"type": "string"},
                            "message": {"type": "string"},
                            "lastTransitionTime": {"type": "string"},
                        },
                    },
                },
                "atProvider": {
                    "type": "object",
                    "properties": {"manifest": _MANIFEST},
                },
            },
        },
    },
}


def get_schema() -> dict:
    """Return the JSON Schema for Object documents."""
    return OBJECT_SCHEMA
