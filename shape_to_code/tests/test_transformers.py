"""
Tests for the model transforms run before code generation.
"""

from __future__ import annotations

import pytest

from shape_to_code.pipeline.errors import InvalidModelError
from shape_to_code.pipeline.model import ShapeId, ShapeType, load_model, traits
from shape_to_code.pipeline.transformers import (
    baseline_transform,
    box_recursive_shapes,
    check_references,
    copy_service_errors_to_operations,
    flatten_mixins,
    normalize_event_streams,
    normalize_operations,
)

SERVICE_ID = ShapeId("example.t", "Svc")


def sid(value: str) -> ShapeId:
    return ShapeId.from_string(value)


def make_model(shapes, operations=("example.t#Op",), errors=()):
    document = {
        "smithy": "2.0",
        "shapes": {
            "example.t#Svc": {
                "type": "service",
                "operations": [{"target": op} for op in operations],
                "errors": [{"target": e} for e in errors],
                "traits": {"aws.protocols#restJson1": {}},
            },
            **shapes,
        },
    }
    return load_model(document)


class TestMixins:
    """Mixin flattening"""

    def model(self):
        return make_model(
            {
                "example.t#Base": {
                    "type": "structure",
                    "members": {
                        "id": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
                        "note": {"target": "smithy.api#String"},
                    },
                    "traits": {"smithy.api#mixin": {}, "smithy.api#documentation": "base"},
                },
                "example.t#Audited": {
                    "type": "structure",
                    "mixins": [{"target": "example.t#Base"}],
                    "members": {"at": {"target": "smithy.api#Timestamp"}},
                    "traits": {"smithy.api#mixin": {}},
                },
                "example.t#Thing": {
                    "type": "structure",
                    "mixins": [{"target": "example.t#Audited"}],
                    "members": {
                        "note": {"target": "smithy.api#String", "traits": {"smithy.api#documentation": "local"}},
                        "size": {"target": "smithy.api#Integer"},
                    },
                },
            },
            operations=(),
        )

    def test_members_are_inherited_in_order(self):
        thing = flatten_mixins(self.model()).expect_shape(sid("example.t#Thing"))
        assert [m.name for m in thing.members] == ["id", "note", "at", "size"]
        assert all(m.container == thing.id for m in thing.members)
        assert thing.mixins == ()

    def test_local_member_adds_traits(self):
        thing = flatten_mixins(self.model()).expect_shape(sid("example.t#Thing"))
        assert thing.expect_member("id").is_required
        assert thing.expect_member("note").get_trait(traits.DOCUMENTATION) == "local"

    def test_mixin_traits_are_inherited_but_not_the_mixin_marker(self):
        thing = flatten_mixins(self.model()).expect_shape(sid("example.t#Thing"))
        assert thing.get_trait(traits.DOCUMENTATION) == "base"
        assert not thing.has_trait(traits.MIXIN)

    def test_mixin_shapes_are_removed(self):
        model = flatten_mixins(self.model())
        assert sid("example.t#Base") not in model
        assert sid("example.t#Audited") not in model

    def test_nested_mixin_is_flattened_into_its_user_only(self):
        model = flatten_mixins(self.model())
        assert sorted(s.name for s in model if s.id.namespace == "example.t") == ["Svc", "Thing"]
        assert [m.name for m in model.expect_shape(sid("example.t#Thing")).members] == ["id", "note", "at", "size"]

    def test_model_without_mixins_is_unchanged(self):
        model = make_model({}, operations=())
        assert flatten_mixins(model) is model

    def test_mixin_cycle_is_rejected(self):
        model = make_model(
            {
                "example.t#A": {"type": "structure", "mixins": [{"target": "example.t#B"}], "traits": {"smithy.api#mixin": {}}},
                "example.t#B": {"type": "structure", "mixins": [{"target": "example.t#A"}], "traits": {"smithy.api#mixin": {}}},
            },
            operations=(),
        )
        with pytest.raises(InvalidModelError):
            flatten_mixins(model)


class TestServiceErrors:
    """Service errors copied onto operations"""

    def model(self):
        return make_model(
            {
                "example.t#Op": {"type": "operation", "errors": [{"target": "example.t#NotFound"}]},
                "example.t#Other": {"type": "operation", "errors": [{"target": "example.t#Busy"}]},
                "example.t#NotFound": {"type": "structure", "traits": {"smithy.api#error": "client"}},
                "example.t#Busy": {"type": "structure", "traits": {"smithy.api#error": "server"}},
            },
            operations=("example.t#Op", "example.t#Other"),
            errors=("example.t#Busy",),
        )

    def test_errors_are_appended(self):
        model = copy_service_errors_to_operations(self.model(), SERVICE_ID)
        assert model.expect_shape(sid("example.t#Op")).errors == (sid("example.t#NotFound"), sid("example.t#Busy"))

    def test_declared_errors_are_not_duplicated(self):
        model = copy_service_errors_to_operations(self.model(), SERVICE_ID)
        assert model.expect_shape(sid("example.t#Other")).errors == (sid("example.t#Busy"),)

    def test_transform_is_idempotent(self):
        once = copy_service_errors_to_operations(self.model(), SERVICE_ID)
        twice = copy_service_errors_to_operations(once, SERVICE_ID)
        assert twice.expect_shape(sid("example.t#Op")).errors == once.expect_shape(sid("example.t#Op")).errors


class TestRecursiveShapes:
    """Boxing of recursive members"""

    def test_self_reference_is_boxed(self):
        model = box_recursive_shapes(
            make_model(
                {"example.t#Node": {"type": "structure", "members": {"next": {"target": "example.t#Node"}}}},
                operations=(),
            )
        )
        assert model.expect_shape(sid("example.t#Node")).expect_member("next").has_trait(traits.BOX)

    def test_smallest_member_id_of_a_cycle_is_boxed(self):
        model = box_recursive_shapes(
            make_model(
                {
                    "example.t#A": {"type": "structure", "members": {"b": {"target": "example.t#B"}}},
                    "example.t#B": {"type": "union", "members": {"a": {"target": "example.t#A"}}},
                },
                operations=(),
            )
        )
        assert model.expect_shape(sid("example.t#A")).expect_member("b").has_trait(traits.BOX)
        assert not model.expect_shape(sid("example.t#B")).expect_member("a").has_trait(traits.BOX)

    def test_cycles_through_collections_are_not_boxed(self):
        model = box_recursive_shapes(
            make_model(
                {
                    "example.t#Tree": {"type": "structure", "members": {"children": {"target": "example.t#Trees"}}},
                    "example.t#Trees": {"type": "list", "member": {"target": "example.t#Tree"}},
                },
                operations=(),
            )
        )
        assert not model.expect_shape(sid("example.t#Tree")).expect_member("children").has_trait(traits.BOX)


class TestOperations:
    """Synthetic operation inputs and outputs"""

    def model(self):
        return make_model(
            {
                "example.t#Op": {
                    "type": "operation",
                    "input": {"target": "example.t#OpRequest"},
                },
                "example.t#OpRequest": {
                    "type": "structure",
                    "members": {"name": {"target": "smithy.api#String"}},
                    "traits": {"smithy.api#input": {}, "smithy.api#documentation": "req"},
                },
            }
        )

    def test_synthetic_shapes_are_added(self):
        model = normalize_operations(self.model())
        operation = model.expect_shape(sid("example.t#Op"))
        assert operation.input == sid("example.t.synthetic#OpInput")
        assert operation.output == sid("example.t.synthetic#OpOutput")

        synthetic_input = model.expect_shape(operation.input, ShapeType.STRUCTURE)
        assert [m.name for m in synthetic_input.members] == ["name"]
        assert synthetic_input.members[0].container == synthetic_input.id
        assert synthetic_input.get_trait(traits.DOCUMENTATION) == "req"
        assert not synthetic_input.has_trait(traits.INPUT)
        assert synthetic_input.get_trait(traits.SYNTHETIC_INPUT) == {
            "operation": "example.t#Op",
            "originalId": "example.t#OpRequest",
        }

    def test_missing_output_becomes_empty_structure(self):
        model = normalize_operations(self.model())
        synthetic_output = model.expect_shape(sid("example.t.synthetic#OpOutput"))
        assert synthetic_output.members == ()
        assert synthetic_output.get_trait(traits.SYNTHETIC_OUTPUT)["originalId"] is None

    def test_unit_output_is_treated_as_absent(self):
        model = make_model({"example.t#Op": {"type": "operation", "output": {"target": "smithy.api#Unit"}}})
        synthetic_output = normalize_operations(model).expect_shape(sid("example.t.synthetic#OpOutput"))
        assert synthetic_output.get_trait(traits.SYNTHETIC_OUTPUT)["originalId"] is None

    def test_conflicting_synthetic_shape_is_rejected(self):
        model = make_model(
            {
                "example.t#Op": {"type": "operation"},
                "example.t.synthetic#OpInput": {"type": "structure"},
            }
        )
        with pytest.raises(InvalidModelError):
            normalize_operations(model)


class TestEventStreams:
    """Event stream unions split from their error members"""

    def model(self):
        return make_model(
            {
                "example.t#Op": {"type": "operation", "output": {"target": "example.t#OpResponse"}},
                "example.t#OpResponse": {
                    "type": "structure",
                    "members": {"events": {"target": "example.t#Events"}},
                },
                "example.t#Events": {
                    "type": "union",
                    "members": {
                        "tick": {"target": "example.t#Tick"},
                        "failure": {"target": "example.t#Failure"},
                    },
                    "traits": {"smithy.api#streaming": {}},
                },
                "example.t#Tick": {"type": "structure"},
                "example.t#Failure": {"type": "structure", "traits": {"smithy.api#error": "server"}},
            }
        )

    def test_member_is_retargeted_to_synthetic_union(self):
        model = normalize_event_streams(normalize_operations(self.model()))
        output = model.expect_shape(sid("example.t.synthetic#OpOutput"))
        union_id = output.expect_member("events").target
        assert union_id == sid("example.t.synthetic#OpOutputEvents")

        union = model.expect_shape(union_id, ShapeType.UNION)
        assert [m.name for m in union.members] == ["tick"]
        assert union.has_trait(traits.STREAMING)
        assert union.get_trait(traits.SYNTHETIC_EVENT_STREAM_UNION) == {
            "originalId": "example.t#Events",
            "errorMembers": ["failure"],
        }


class TestReferences:
    """Dangling reference detection"""

    def test_dangling_member_target(self):
        model = make_model(
            {"example.t#Op": {"type": "operation", "input": {"target": "example.t#Missing"}}},
        )
        with pytest.raises(InvalidModelError) as exc_info:
            check_references(model)
        assert "example.t#Missing" in str(exc_info.value)

    def test_baseline_transform_checks_references_first(self):
        model = make_model({}, operations=("example.t#Nope",))
        with pytest.raises(InvalidModelError):
            baseline_transform(model, SERVICE_ID)


def test_baseline_transform_pipeline():
    """The whole pipeline on a model using every transform"""
    model = make_model(
        {
            "example.t#Op": {"type": "operation", "input": {"target": "example.t#OpRequest"}},
            "example.t#Named": {
                "type": "structure",
                "members": {"name": {"target": "smithy.api#String"}},
                "traits": {"smithy.api#mixin": {}},
            },
            "example.t#OpRequest": {
                "type": "structure",
                "mixins": [{"target": "example.t#Named"}],
                "members": {"parent": {"target": "example.t#OpRequest"}},
            },
            "example.t#Oops": {"type": "structure", "traits": {"smithy.api#error": "client"}},
        },
        errors=("example.t#Oops",),
    )
    result = baseline_transform(model, SERVICE_ID)

    operation = result.expect_shape(sid("example.t#Op"))
    assert operation.errors == (sid("example.t#Oops"),)
    synthetic_input = result.expect_shape(operation.input)
    assert [m.name for m in synthetic_input.members] == ["name", "parent"]
    assert synthetic_input.expect_member("parent").has_trait(traits.BOX)
    assert sid("example.t#Named") not in result
