"""Tests for field path parsing and paved documents."""

import pytest

from kubeobject.errors import ConversionError, InvalidPathError, NotFoundError
from kubeobject.fieldpath import Paved, SegmentType, join, parse, pave, to_unstructured


# --- Parsing ---


def test_parse_dotted_fields():
    segments = parse("status.atProvider.id")
    assert [s.field for s in segments] == ["status", "atProvider", "id"]
    assert all(s.type == SegmentType.FIELD for s in segments)


def test_parse_indices_and_bracketed_keys():
    segments = parse("spec.containers[0].env[12]")
    assert [str(s) for s in segments] == ["spec", "containers", "[0]", "env", "[12]"]
    assert segments[2].type == SegmentType.INDEX
    assert segments[2].index == 0

    segments = parse("metadata.labels[app.kubernetes.io/name]")
    assert segments[-1].type == SegmentType.FIELD
    assert segments[-1].field == "app.kubernetes.io/name"


def test_parse_leading_index():
    segments = parse("[3].name")
    assert segments[0].type == SegmentType.INDEX
    assert segments[1].field == "name"


@pytest.mark.parametrize(
    "path",
    ["", ".a", "a.", "a..b", "a[0", "a]", "a[]", "a[0]b"],
)
def test_parse_rejects_malformed_paths(path):
    with pytest.raises(InvalidPathError):
        parse(path)


def test_join_renders_paths():
    assert join(parse("a.b[2].c")) == "a.b[2].c"
    assert join(parse("metadata.labels[app.kubernetes.io/name]")) == (
        "metadata.labels[app.kubernetes.io/name]"
    )


# --- Reading ---


def test_get_value_nested():
    paved = Paved({"status": {"id": "abc-123", "ports": [80, 443]}})
    assert paved.get_value("status.id") == "abc-123"
    assert paved.get_value("status.ports[1]") == 443
    assert paved.get_value("status") == {"id": "abc-123", "ports": [80, 443]}


def test_get_value_missing_field():
    paved = Paved({"a": {"b": 1}})
    with pytest.raises(NotFoundError) as exc:
        paved.get_value("a.c")
    assert exc.value.path == "a.c"


def test_get_value_index_out_of_bounds():
    paved = Paved({"items": [1]})
    with pytest.raises(NotFoundError):
        paved.get_value("items[5]")


def test_get_value_through_null_is_not_found():
    paved = Paved({"a": None})
    with pytest.raises(NotFoundError):
        paved.get_value("a.b")


def test_get_value_through_scalar_is_invalid():
    paved = Paved({"a": 1})
    with pytest.raises(InvalidPathError):
        paved.get_value("a.b")
    with pytest.raises(InvalidPathError):
        paved.get_value("a[0]")


def test_get_value_returns_copy():
    content = {"a": {"b": [1, 2]}}
    value = Paved(content).get_value("a")
    value["b"].append(3)
    assert content == {"a": {"b": [1, 2]}}


# --- Writing ---


def test_set_value_creates_intermediate_nodes():
    paved = Paved({})
    paved.set_value("spec.template.labels[app.kubernetes.io/name]", "web")
    assert paved.unstructured_content() == {
        "spec": {"template": {"labels": {"app.kubernetes.io/name": "web"}}}
    }


def test_set_value_pads_arrays():
    paved = Paved({})
    paved.set_value("ports[2].name", "https")
    assert paved.unstructured_content() == {"ports": [None, None, {"name": "https"}]}


def test_set_value_overwrites_existing():
    paved = Paved({"data": {"key": "old", "other": "keep"}})
    paved.set_value("data.key", "new")
    assert paved.unstructured_content() == {"data": {"key": "new", "other": "keep"}}


def test_set_value_through_scalar_is_invalid():
    paved = Paved({"data": "text"})
    with pytest.raises(InvalidPathError):
        paved.set_value("data.key", 1)
    with pytest.raises(InvalidPathError):
        paved.set_value("data[0]", 1)


def test_set_value_index_on_object_root_is_invalid():
    with pytest.raises(InvalidPathError):
        Paved({}).set_value("[0]", 1)


def test_set_value_copies_value():
    value = {"nested": [1]}
    paved = Paved({})
    paved.set_value("a", value)
    value["nested"].append(2)
    assert paved.get_value("a") == {"nested": [1]}


# --- Paving and conversion ---


def test_pave_mapping_is_a_copy():
    doc = {"a": {"b": 1}}
    paved = pave(doc)
    paved.set_value("a.b", 2)
    assert doc == {"a": {"b": 1}}


def test_pave_rejects_non_objects():
    with pytest.raises(ConversionError):
        pave(["not", "an", "object"])


def test_to_unstructured_accepts_json_values():
    value = {"a": [1, 2.5, True, None, "x"], "b": ({"c": 1},)}
    assert to_unstructured(value) == {"a": [1, 2.5, True, None, "x"], "b": [{"c": 1}]}


def test_to_unstructured_rejects_other_types():
    import datetime

    with pytest.raises(ConversionError) as exc:
        to_unstructured({"a": {"when": datetime.date(2024, 1, 1)}})
    assert exc.value.location == "a.when"

    with pytest.raises(ConversionError):
        to_unstructured({1: "non-string key"})
