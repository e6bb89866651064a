"""API types for the Object managed resource.

This package holds the wire contract of the kubernetes.crossplane.io/v1alpha1
Object kind:
1. Types: typed dataclasses for Object, its spec, status and references
2. Schema: JSON Schema for structural validation
3. Semantic validator: reference consistency checks beyond the schema
"""

GROUP = "kubernetes.crossplane.io"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP}/{VERSION}"
KIND = "Object"

# Every patch lands inside this region of the destination document.
MANIFEST_PATH = "spec.forProvider.manifest"
