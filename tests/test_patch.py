"""Tests for the field path patch engine."""

import copy
import datetime

import pytest

from kubeobject.api import API_VERSION, KIND
from kubeobject.api.types import DependsOn, Object, ObjectParameters, ObjectSpec, PatchesFrom, Reference
from kubeobject.errors import ConversionError, InvalidPathError, NotFoundError, ReferenceNotFoundError
from kubeobject.patch import apply_field_path_patch, apply_references, patch_field_value_to_object
from kubeobject.resolver import LocalResolver


def _patch_ref(field_path: str, to_field_path: str | None = None, name: str = "src") -> Reference:
    return Reference(
        patches_from=PatchesFrom(name=name, field_path=field_path),
        to_field_path=to_field_path,
    )


def _manifest(doc: dict) -> dict:
    return doc["spec"]["forProvider"]["manifest"]


def test_patch_scenario_records_to_field_path():
    ref = Reference.from_dict({"patchesFrom": {"name": "src", "fieldPath": "status.id"}})
    patched = ref.apply_from_field_path_patch({"status": {"id": "abc-123"}}, {})

    assert patched == {"spec": {"forProvider": {"manifest": {"status": {"id": "abc-123"}}}}}
    assert ref.to_field_path == "status.id"


def test_functional_patch_leaves_reference_untouched():
    ref = _patch_ref("status.id")
    result = apply_field_path_patch(ref, {"status": {"id": "abc-123"}}, {})

    assert result.to_field_path == "status.id"
    assert result.value == "abc-123"
    assert ref.to_field_path is None


def test_explicit_to_field_path_wins():
    ref = _patch_ref("status.atProvider.endpoint", to_field_path="data.endpoint")
    result = apply_field_path_patch(
        ref, {"status": {"atProvider": {"endpoint": "db.local"}}}, {}
    )
    assert _manifest(result.destination) == {"data": {"endpoint": "db.local"}}
    assert result.to_field_path == "data.endpoint"


def test_recorded_path_is_reused():
    ref = _patch_ref("spec.replicas")
    ref.apply_from_field_path_patch({"spec": {"replicas": 3}}, {})
    assert ref.to_field_path == "spec.replicas"

    ref.to_field_path = "spec.minReplicas"
    patched = ref.apply_from_field_path_patch({"spec": {"replicas": 5}}, {})
    assert _manifest(patched) == {"spec": {"minReplicas": 5}}


def test_nested_value_round_trip():
    nested = {"ports": [{"name": "http", "port": 80}], "labels": {"tier": "web"}}
    source = {"spec": {"template": nested}}
    result = apply_field_path_patch(_patch_ref("spec.template", "spec.template"), source, {})
    assert _manifest(result.destination)["spec"]["template"] == nested


def test_value_is_copied_not_aliased():
    source = {"data": {"list": [1, 2]}}
    result = apply_field_path_patch(_patch_ref("data"), source, {})
    source["data"]["list"].append(3)
    assert _manifest(result.destination)["data"] == {"list": [1, 2]}


def test_other_fields_are_left_untouched():
    destination = {
        "metadata": {"name": "dest", "labels": {"a": "b"}},
        "spec": {
            "managementPolicy": "Observe",
            "forProvider": {"manifest": {"kind": "ConfigMap", "data": {"keep": "me"}}},
        },
        "status": {"atProvider": {"manifest": {"data": {"id": "observed"}}}},
    }
    before = copy.deepcopy(destination)
    result = apply_field_path_patch(_patch_ref("status.id", "data.id"), {"status": {"id": "x"}}, destination)

    assert destination == before
    expected = copy.deepcopy(before)
    expected["spec"]["forProvider"]["manifest"]["data"]["id"] = "x"
    assert result.destination == expected


def test_missing_source_path_raises_not_found():
    destination = {"spec": {"forProvider": {"manifest": {}}}}
    before = copy.deepcopy(destination)
    with pytest.raises(NotFoundError):
        apply_field_path_patch(_patch_ref("a.c"), {"a": {"b": 1}}, destination)
    assert destination == before


def test_missing_source_path_still_records_to_field_path():
    ref = _patch_ref("a.c")
    destination = {}
    with pytest.raises(NotFoundError):
        ref.apply_from_field_path_patch({"a": {"b": 1}}, destination)
    assert ref.to_field_path == "a.c"
    assert destination == {}


def test_depends_on_only_reference_records_nothing():
    ref = Reference(depends_on=DependsOn(name="ns"))
    with pytest.raises(InvalidPathError):
        ref.apply_from_field_path_patch({}, {})
    assert ref.to_field_path is None


def test_write_through_scalar_raises_invalid_path():
    destination = {"spec": {"forProvider": {"manifest": {"data": "text"}}}}
    with pytest.raises(InvalidPathError):
        apply_field_path_patch(_patch_ref("id", "data.id"), {"id": 1}, destination)


def test_malformed_to_field_path_raises_invalid_path():
    with pytest.raises(InvalidPathError):
        apply_field_path_patch(_patch_ref("id", "data..id"), {"id": 1}, {})
    with pytest.raises(InvalidPathError):
        apply_field_path_patch(_patch_ref("id", ""), {"id": 1}, {})


def test_non_object_manifest_region_raises_invalid_path():
    with pytest.raises(InvalidPathError) as exc:
        apply_field_path_patch(_patch_ref("id"), {"id": 1}, {"spec": {"forProvider": "oops"}})
    assert exc.value.path == "spec.forProvider"


def test_depends_on_only_reference_cannot_patch():
    ref = Reference(depends_on=DependsOn(name="src"))
    with pytest.raises(InvalidPathError):
        apply_field_path_patch(ref, {"a": 1}, {})


def test_patch_typed_object_destination():
    obj = Object(
        metadata={"name": "dest"},
        spec=ObjectSpec(for_provider=ObjectParameters(manifest={"kind": "ConfigMap"})),
    )
    source = Object(
        metadata={"name": "src"},
        spec=ObjectSpec(for_provider=ObjectParameters(manifest={"data": {"host": "db"}})),
    )
    ref = _patch_ref("spec.forProvider.manifest.data.host", "data.host")
    result = apply_field_path_patch(ref, source, obj)

    assert isinstance(result.destination, Object)
    assert result.destination.spec.for_provider.manifest == {
        "kind": "ConfigMap",
        "data": {"host": "db"},
    }
    assert obj.spec.for_provider.manifest == {"kind": "ConfigMap"}


def test_unconvertible_value_raises_conversion_error():
    source = {"status": {"created": datetime.datetime(2024, 1, 1)}}
    with pytest.raises(ConversionError):
        apply_field_path_patch(_patch_ref("status.created"), source, Object())
    with pytest.raises(ConversionError):
        apply_field_path_patch(_patch_ref("status.created"), source, {})


def test_patch_field_value_to_object_is_confined_to_manifest():
    patched = patch_field_value_to_object("metadata.name", "inner", {"metadata": {"name": "outer"}})
    assert patched["metadata"] == {"name": "outer"}
    assert _manifest(patched) == {"metadata": {"name": "inner"}}


def test_apply_references_in_order():
    obj = Object.from_dict(
        {
            "apiVersion": API_VERSION,
            "kind": KIND,
            "metadata": {"name": "app"},
            "spec": {
                "references": [
                    {"dependsOn": {"name": "ns"}},
                    {"patchesFrom": {"apiVersion": "v1", "kind": "Secret", "name": "creds",
                                     "namespace": "prod", "fieldPath": "data.password"},
                     "toFieldPath": "data.password"},
                    {"patchesFrom": {"name": "db", "fieldPath": "status.atProvider.manifest.spec.host"},
                     "toFieldPath": "data.host"},
                ],
                "forProvider": {"manifest": {"kind": "ConfigMap", "data": {}}},
            },
        }
    )
    resolver = LocalResolver(
        [
            {"apiVersion": "v1", "kind": "Secret",
             "metadata": {"name": "creds", "namespace": "prod"}, "data": {"password": "s3cr3t"}},
            {"apiVersion": API_VERSION, "kind": KIND, "metadata": {"name": "db"},
             "status": {"atProvider": {"manifest": {"spec": {"host": "db.prod"}}}}},
        ]
    )
    patched = apply_references(obj, resolver)

    assert patched.spec.for_provider.manifest["data"] == {"password": "s3cr3t", "host": "db.prod"}
    assert obj.spec.for_provider.manifest["data"] == {}
    assert patched.spec.references == obj.spec.references


def test_apply_references_unresolved_source():
    obj = Object(spec=ObjectSpec(references=[_patch_ref("status.id", name="missing")]))
    with pytest.raises(ReferenceNotFoundError):
        apply_references(obj, LocalResolver())
