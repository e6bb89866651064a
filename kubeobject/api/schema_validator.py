"""Schema validator: structural validation of Object documents.

Checks required fields, types and enums against the Object JSON Schema
before any typed conversion or semantic checks. Nodes marked
``x-kubernetes-preserve-unknown-fields`` are only type-checked. A null
value is read as absent, the same as in typed conversion.
"""

from __future__ import annotations

import re

from kubeobject.api.schema import get_schema


def validate_schema(data) -> list[str]:
    """Validate a parsed Object document against the JSON Schema.

    Returns:
        List of error messages. Empty list means valid.
    """
    issues: list[str] = []
    _validate_node(data, get_schema(), "", issues)
    return issues


def _validate_node(data, schema: dict, path: str, issues: list[str]):
    where = path or "/"
    schema_type = schema.get("type")

    if schema_type and not _type_matches(data, schema_type):
        issues.append(f"{where}: expected type '{schema_type}', got {type(data).__name__}")
        return

    if "enum" in schema and data not in schema["enum"]:
        issues.append(f"{where}: value '{data}' not in allowed values {schema['enum']}")

    if isinstance(data, str):
        min_len = schema.get("minLength", 0)
        if len(data) < min_len:
            issues.append(f"{where}: string too short (min {min_len}, got {len(data)})")
        if "pattern" in schema and not re.match(schema["pattern"], data):
            issues.append(f"{where}: string '{data}' does not match pattern '{schema['pattern']}'")

    if isinstance(data, dict):
        # null is read as absent, both here and in typed conversion
        for req in schema.get("required", []):
            if data.get(req) is None:
                issues.append(f"{where}: missing required property '{req}'")

        if schema.get("x-kubernetes-preserve-unknown-fields"):
            return

        props = schema.get("properties", {})
        for key, value in data.items():
            if key in props and value is not None:
                _validate_node(value, props[key], f"{path}.{key}" if path else key, issues)

    if isinstance(data, list) and "items" in schema:
        for i, item in enumerate(data):
            _validate_node(item, schema["items"], f"{path}[{i}]", issues)


def _type_matches(data, schema_type: str) -> bool:
    type_map = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }
    expected = type_map.get(schema_type)
    if expected is None:
        return True
    # bool is an int subclass; YAML booleans must not pass as numbers
    if schema_type in ("integer", "number") and isinstance(data, bool):
        return False
    return isinstance(data, expected)
