"""Semantic validator for Object references.

Goes beyond JSON Schema structural validation to check rules the schema
cannot express:
- Each reference sets exactly one of dependsOn / patchesFrom
- toFieldPath is only meaningful alongside patchesFrom
- fieldPath and toFieldPath parse as field paths
- No reference points at the Object itself
- No two patches write the same manifest path

Expects a document that already passed schema validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from kubeobject.api import API_VERSION, KIND
from kubeobject.errors import InvalidPathError
from kubeobject.fieldpath import parse


class Severity(Enum):
    ERROR = "error"  # Object cannot be reconciled as declared
    WARNING = "warning"  # Likely a mistake, but reconcilable


@dataclass
class ValidationIssue:
    """A single issue found during semantic validation."""

    severity: Severity
    code: str  # Machine-readable issue code
    message: str
    path: str = ""  # Location, e.g. "spec.references[1].toFieldPath"


@dataclass
class SemanticValidationResult:
    """Result of semantic validation on an Object."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not any(i.severity == Severity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {len(self.errors)} error(s), {len(self.warnings)} warning(s)"


def validate_semantics(data: dict) -> SemanticValidationResult:
    """Run semantic validation on a parsed Object document."""
    result = SemanticValidationResult()
    references = (data.get("spec") or {}).get("references") or []

    for i, ref in enumerate(references):
        path = f"spec.references[{i}]"
        _check_variant(ref, path, result)
        _check_field_paths(ref, path, result)
        _check_self_reference(data, ref, path, result)

    _check_duplicate_destinations(references, result)
    return result


def _check_variant(ref: dict, path: str, result: SemanticValidationResult):
    """Exactly one of dependsOn / patchesFrom must be set."""
    has_depends = ref.get("dependsOn") is not None
    has_patches = ref.get("patchesFrom") is not None

    if has_depends and has_patches:
        result.issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                code="REFERENCE_AMBIGUOUS",
                message=(
                    "Reference sets both 'dependsOn' and 'patchesFrom'. "
                    "Use 'patchesFrom' alone; it already implies the dependency."
                ),
                path=path,
            )
        )
    elif not has_depends and not has_patches:
        result.issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                code="REFERENCE_EMPTY",
                message="Reference sets neither 'dependsOn' nor 'patchesFrom'.",
                path=path,
            )
        )

    if ref.get("toFieldPath") is not None and not has_patches:
        result.issues.append(
            ValidationIssue(
                severity=Severity.WARNING,
                code="TO_FIELD_PATH_UNUSED",
                message="'toFieldPath' has no effect without 'patchesFrom'.",
                path=f"{path}.toFieldPath",
            )
        )


def _check_field_paths(ref: dict, path: str, result: SemanticValidationResult):
    candidates = [
        ((ref.get("patchesFrom") or {}).get("fieldPath"), f"{path}.patchesFrom.fieldPath"),
        (ref.get("toFieldPath"), f"{path}.toFieldPath"),
    ]
    for value, where in candidates:
        if value is None:
            continue
        try:
            parse(value)
        except InvalidPathError as e:
            result.issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    code="FIELD_PATH_INVALID",
                    message=f"Invalid field path {value!r}: {e}",
                    path=where,
                )
            )


def _check_self_reference(data: dict, ref: dict, path: str, result: SemanticValidationResult):
    target = ref.get("patchesFrom") or ref.get("dependsOn")
    if not target:
        return

    metadata = data.get("metadata") or {}
    own = (
        data.get("apiVersion", API_VERSION),
        data.get("kind", KIND),
        metadata.get("namespace", ""),
        metadata.get("name", ""),
    )
    referenced = (
        target.get("apiVersion") or API_VERSION,
        target.get("kind") or KIND,
        target.get("namespace", ""),
        target.get("name", ""),
    )
    if own[3] and referenced == own:
        result.issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                code="SELF_REFERENCE",
                message=f"Reference points at this {KIND} itself ('{own[3]}').",
                path=path,
            )
        )


def _check_duplicate_destinations(references: list, result: SemanticValidationResult):
    """Warn when two patches write the same manifest path; the last one wins."""
    seen: dict[str, int] = {}
    for i, ref in enumerate(references):
        patches_from = ref.get("patchesFrom")
        if not patches_from:
            continue
        to_field_path = ref.get("toFieldPath")
        destination = to_field_path if to_field_path is not None else patches_from.get("fieldPath")
        if not destination:
            continue
        if destination in seen:
            result.issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    code="DUPLICATE_DESTINATION",
                    message=(
                        f"References {seen[destination]} and {i} both write "
                        f"'{destination}'; the later one wins."
                    ),
                    path=f"spec.references[{i}]",
                )
            )
        else:
            seen[destination] = i
