"""
Tests for generated packages.

A model is generated, written to a temporary directory and imported; the
tests then drive the generated types, builders, serializers and parsers.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shape_to_code.runtime import BuildError, DeserializationError, SerializationError


def echo_model(input_members, shapes=None, protocol="aws.protocols#restJson1"):
    """A service with a single ``Send`` operation whose input and output share members."""
    model_shapes = {
        "example.echo#Echo": {
            "type": "service",
            "version": "1",
            "operations": [{"target": "example.echo#Send"}],
            "traits": {protocol: {}},
        },
        "example.echo#Send": {
            "type": "operation",
            "input": {"target": "example.echo#SendRequest"},
            "output": {"target": "example.echo#SendResponse"},
        },
        "example.echo#SendRequest": {"type": "structure", "members": input_members},
        "example.echo#SendResponse": {"type": "structure", "members": input_members},
    }
    model_shapes.update(shapes or {})
    return {"smithy": "2.0", "shapes": model_shapes}


@pytest.fixture
def people(generate_package, people_model):
    return generate_package(people_model)


class TestStructures:
    """Structures, builders and their JSON form"""

    def test_only_set_members_are_written(self, generate_package):
        """A required name and an unset optional age serialize to the name alone"""
        pkg = generate_package(
            echo_model(
                {
                    "name": {"target": "smithy.api#String", "traits": {"smithy.api#required": {}}},
                    "age": {"target": "smithy.api#Integer"},
                }
            )
        )
        body = pkg.operation.SEND.serialize_request(pkg.input.SendInput(name="a"))
        assert body == b'{"name":"a"}'

        parsed = pkg.operation.SEND.parse_request(body)
        assert parsed == pkg.input.SendInput(name="a", age=None)

    def test_builder_reports_missing_required_field(self, people):
        with pytest.raises(BuildError) as exc_info:
            people.model.Person.builder().age(3).build()
        assert exc_info.value.field == "name"

    def test_builder_applies_defaults(self, people):
        person = people.model.Person.builder().name("a").build()
        assert person.active is True
        assert person.visits == 0
        assert person.age is None

    def test_parse_missing_required_field_fails(self, people):
        with pytest.raises(DeserializationError) as exc_info:
            people.operation.PUT_PERSON.parse_request(
                b'{"person":{"age":3}}', people.input.PutPersonInput.builder().id("1")
            )
        assert exc_info.value.path == "$.person"

    def test_parse_type_mismatch_reports_path(self, people):
        with pytest.raises(DeserializationError) as exc_info:
            people.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","age":"old"}}', people.input.PutPersonInput.builder().id("1")
            )
        assert exc_info.value.path == "$.person.age"

    def test_full_person_roundtrip(self, people):
        """Every member kind survives serialize then parse"""
        model = people.model
        person = model.Person(
            name="Ada",
            age=36,
            nicknames=["countess", None],
            status=model.Status.RETIRED,
            pet=model.PetDog(value=model.Dog(breed="lab", good_boy=True)),
            friend=model.Person(name="Charles"),
            friends=[model.Person(name="Mary", visits=2)],
            scores={model.Status.ACTIVE: 1.5},
            born=datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
            last_seen=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            photo=b"\x00\xffpng",
            balance=Decimal("12345678901234567890.123456789"),
            population=10**30,
            account_id=2**63 - 1,
            height=1.75,
            active=False,
            visits=7,
            metadata={"tags": ["x", 1, 2.5, None, True], "nested": {"ok": False}},
        )
        request = people.input.PutPersonInput(id="1", person=person, labels={"team": "math", "desk": None})
        operation = people.operation.PUT_PERSON

        body = operation.serialize_request(request)
        parsed = operation.parse_request(body, people.input.PutPersonInput.builder().id("1"))

        assert parsed == request

    def test_wire_names_and_formats(self, people):
        model = people.model
        person = model.Person(
            name="a",
            born=datetime(2024, 1, 2, 3, 4, 5, 500000, tzinfo=timezone.utc),
            last_seen=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            photo=b"hi",
            account_id=-(2**63),
        )
        body = people.operation.PUT_PERSON.serialize_request(people.input.PutPersonInput(id="1", person=person))
        document = json.loads(body)["person"]

        assert document["born"] == 1704164645.5
        assert document["lastSeen"] == "Sat, 01 Jun 2024 12:00:00 GMT"
        assert document["photo"] == "aGk="
        assert document["accountId"] == -(2**63)
        assert "last_seen" not in document

    def test_boxed_member_is_quoted(self, generate_package, people_model, tmp_path):
        people = generate_package(people_model)
        source = (tmp_path / people.__name__ / "model.py").read_text()
        assert 'friend: "Person | None" = None' in source


class TestNumbers:
    """Integer bounds and float edge cases"""

    def test_int64_boundaries(self, people):
        builder = people.input.PutPersonInput.builder().id("1")
        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a","accountId":9223372036854775807}}', builder
        )
        assert parsed.person.account_id == 2**63 - 1

        with pytest.raises(DeserializationError):
            people.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","accountId":9223372036854775808}}',
                people.input.PutPersonInput.builder().id("1"),
            )

    def test_int32_overflow_is_rejected(self, people):
        with pytest.raises(DeserializationError) as exc_info:
            people.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","age":2147483648}}', people.input.PutPersonInput.builder().id("1")
            )
        assert exc_info.value.path == "$.person.age"

    def test_non_finite_floats(self, people):
        person = people.model.Person(name="a", height=float("nan"))
        body = people.operation.PUT_PERSON.serialize_request(people.input.PutPersonInput(id="1", person=person))
        assert b'"height":"NaN"' in body

        parsed = people.operation.PUT_PERSON.parse_request(body, people.input.PutPersonInput.builder().id("1"))
        assert math.isnan(parsed.person.height)

    def test_big_decimal_keeps_precision(self, people):
        body = b'{"person":{"name":"a","balance":0.1000000000000000000000000001}}'
        parsed = people.operation.PUT_PERSON.parse_request(body, people.input.PutPersonInput.builder().id("1"))
        assert parsed.person.balance == Decimal("0.1000000000000000000000000001")


class TestZeroValues:
    """Elision of members equal to their zero default"""

    def test_default_person_body(self, people):
        body = people.operation.PUT_PERSON.serialize_request(
            people.input.PutPersonInput(id="1", person=people.model.Person(name="a"))
        )
        assert body == b'{"person":{"name":"a","active":true}}'

    def test_non_zero_values_are_written(self, people):
        request = people.input.PutPersonInput(id="1", person=people.model.Person(name="a", visits=3), dry_run=True)
        document = json.loads(people.operation.PUT_PERSON.serialize_request(request))
        assert document["person"]["visits"] == 3
        assert document["dry_run"] is True

    def test_elision_can_be_disabled(self, generate_package, people_model):
        pkg = generate_package(people_model, elide_zero_values=False)
        body = pkg.operation.PUT_PERSON.serialize_request(pkg.input.PutPersonInput(id="1", person=pkg.model.Person(name="a")))
        document = json.loads(body)
        assert document["person"]["visits"] == 0
        assert document["dry_run"] is False


class TestCollections:
    """Sparse and dense lists and maps"""

    def test_dense_list_skips_nulls(self, people):
        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a","friends":[null,{"name":"b"}]}}', people.input.PutPersonInput.builder().id("1")
        )
        assert parsed.person.friends == [people.model.Person(name="b")]

    def test_sparse_list_keeps_nulls(self, people):
        person = people.model.Person(name="a", nicknames=["x", None])
        body = people.operation.PUT_PERSON.serialize_request(people.input.PutPersonInput(id="1", person=person))
        assert b'"nicknames":["x",null]' in body

        parsed = people.operation.PUT_PERSON.parse_request(body, people.input.PutPersonInput.builder().id("1"))
        assert parsed.person.nicknames == ["x", None]

    def test_sparse_map_keeps_nulls(self, people):
        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a"},"labels":{"a":"1","b":null}}', people.input.PutPersonInput.builder().id("1")
        )
        assert parsed.labels == {"a": "1", "b": None}

    def test_enum_map_keys(self, people):
        status = people.model.Status
        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a","scores":{"active":2,"retired":0.5}}}',
            people.input.PutPersonInput.builder().id("1"),
        )
        assert parsed.person.scores == {status.ACTIVE: 2.0, status.RETIRED: 0.5}

    def test_nested_optional_annotations(self, generate_package, people_model, tmp_path):
        people = generate_package(people_model)
        model_source = (tmp_path / people.__name__ / "model.py").read_text()
        input_source = (tmp_path / people.__name__ / "input.py").read_text()
        assert "nicknames: list[str | None] | None = None" in model_source
        assert "friends: list[Person] | None = None" in model_source
        assert "labels: dict[str, str | None] | None = None" in input_source


class TestUnionsAndEnums:
    """Unknown union variants and open enums"""

    def test_union_variants_roundtrip(self, people):
        model = people.model
        for pet in (model.PetName(value="Rex"), model.PetNone(), model.PetDog(value=model.Dog(breed="pug"))):
            request = people.input.PutPersonInput(id="1", person=model.Person(name="a", pet=pet))
            body = people.operation.PUT_PERSON.serialize_request(request)
            parsed = people.operation.PUT_PERSON.parse_request(body, people.input.PutPersonInput.builder().id("1"))
            assert parsed.person.pet == pet

    def test_unit_variant_is_an_empty_object(self, people):
        person = people.model.Person(name="a", pet=people.model.PetNone())
        body = people.operation.PUT_PERSON.serialize_request(people.input.PutPersonInput(id="1", person=person))
        assert b'"pet":{"none":{}}' in body

    def test_client_keeps_unknown_variant(self, people):
        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a","pet":{"cat":{"lives":9}}}}', people.input.PutPersonInput.builder().id("1")
        )
        assert parsed.person.pet == people.model.PetUnknown(tag="cat")

    def test_unknown_variant_cannot_be_serialized(self, people):
        person = people.model.Person(name="a", pet=people.model.PetUnknown(tag="cat"))
        with pytest.raises(SerializationError) as exc_info:
            people.operation.PUT_PERSON.serialize_request(people.input.PutPersonInput(id="1", person=person))
        assert exc_info.value.union == "Pet"

    def test_union_needs_exactly_one_variant(self, people):
        with pytest.raises(DeserializationError):
            people.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","pet":{"name":"Rex","none":{}}}}', people.input.PutPersonInput.builder().id("1")
            )

    def test_server_rejects_unknown_variant(self, generate_package, people_model):
        pkg = generate_package(people_model, target="server")
        assert not hasattr(pkg.model, "PetUnknown")
        with pytest.raises(DeserializationError) as exc_info:
            pkg.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","pet":{"cat":{}}}}', pkg.input.PutPersonInput.builder().id("1")
            )
        assert "cat" in str(exc_info.value)

    def test_client_enum_is_open(self, people):
        status = people.model.Status
        assert not status.ACTIVE.is_unknown()
        assert status.from_str("retired") is status.RETIRED

        parsed = people.operation.PUT_PERSON.parse_request(
            b'{"person":{"name":"a","status":"deceased"}}', people.input.PutPersonInput.builder().id("1")
        )
        assert parsed.person.status.is_unknown()
        assert parsed.person.status.as_str() == "deceased"

        body = people.operation.PUT_PERSON.serialize_request(parsed)
        assert b'"status":"deceased"' in body

    def test_server_enum_is_closed(self, generate_package, people_model):
        pkg = generate_package(people_model, target="server")
        with pytest.raises(ValueError):
            pkg.model.Status.from_str("deceased")
        with pytest.raises(DeserializationError):
            pkg.operation.PUT_PERSON.parse_request(
                b'{"person":{"name":"a","status":"deceased"}}', pkg.input.PutPersonInput.builder().id("1")
            )


class TestOperations:
    """Operation descriptors, payloads and errors"""

    def test_service_descriptor(self, people):
        service = people.SERVICE
        assert service.name == "PeopleService"
        assert service.version == "2024-06-01"
        assert service.protocol == "aws.protocols#restJson1"
        assert list(service.operations) == ["DeletePerson", "GetPerson", "PutPerson", "UploadAvatar"]
        assert service.operation("GetPerson") is people.operation.GET_PERSON
        with pytest.raises(KeyError):
            service.operation("ListPeople")

    def test_non_body_members_are_not_serialized(self, people):
        output = people.output.GetPersonOutput(person=people.model.Person(name="a"), etag="abc")
        body = people.operation.GET_PERSON.serialize_response(output)
        assert body == b'{"person":{"name":"a","active":true}}'

        # GetPerson has only a label and a query member
        assert people.operation.GET_PERSON.serialize_input is None

    def test_operation_without_output(self, people):
        operation = people.operation.DELETE_PERSON
        assert operation.serialize_output is None
        assert operation.deserialize_output is None
        assert operation.serialize_response(people.output.DeletePersonOutput()) == b""
        assert operation.parse_response(b"") == people.output.DeletePersonOutput()

    def test_blob_payload(self, people):
        operation = people.operation.UPLOAD_AVATAR
        request = people.input.UploadAvatarInput(id="1", content_type="image/png", image=b"\x89PNG")
        assert operation.serialize_request(request) == b"\x89PNG"

        parsed = operation.parse_request(b"\x89PNG", people.input.UploadAvatarInput.builder().id("1"))
        assert parsed.image == b"\x89PNG"
        assert parsed.content_type is None

    def test_structure_payload(self, people):
        operation = people.operation.UPLOAD_AVATAR
        output = people.output.UploadAvatarOutput(avatar=people.model.Avatar(url="https://a/b.png", width=64))
        body = operation.serialize_response(output)
        assert body == b'{"url":"https://a/b.png","width":64}'
        assert operation.parse_response(body) == output

        assert operation.serialize_response(people.output.UploadAvatarOutput()) == b"{}"
        assert operation.parse_response(b"") == people.output.UploadAvatarOutput()

    def test_output_timestamp_format(self, people):
        created = datetime(2024, 6, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
        output = people.output.PutPersonOutput(created=created, revision=3)
        body = people.operation.PUT_PERSON.serialize_response(output)
        assert body == b'{"created":"2024-06-01T12:30:15.250000Z","revision":3}'
        assert people.operation.PUT_PERSON.parse_response(body) == output

    def test_errors_roundtrip(self, people):
        operation = people.operation.GET_PERSON
        assert set(operation.errors) == {"PersonNotFound", "ServiceUnavailable"}

        error = people.error.PersonNotFound(message="gone", id="7")
        body = operation.serialize_error(error)
        assert body == b'{"message":"gone","id":"7"}'

        parsed = operation.parse_error("PersonNotFound", body)
        assert parsed == error
        assert isinstance(parsed, Exception)
        assert str(parsed) == "PersonNotFound: gone"

    def test_service_errors_are_copied_to_every_operation(self, people):
        for operation in people.SERVICE.operations.values():
            assert "ServiceUnavailable" in operation.errors

    def test_unknown_error_code(self, people):
        with pytest.raises(DeserializationError):
            people.operation.GET_PERSON.parse_error("Teapot", b"{}")
        with pytest.raises(SerializationError):
            people.operation.GET_PERSON.serialize_error(ValueError("nope"))

    def test_modeled_errors_can_be_raised(self, people):
        with pytest.raises(people.error.ServiceUnavailable) as exc_info:
            raise people.error.ServiceUnavailable(message="later")
        assert exc_info.value.message == "later"


class TestAwsJson:
    """awsJson protocols: no HTTP bindings, ``__type`` on errors"""

    def aws_model(self, protocol="aws.protocols#awsJson1_1"):
        return echo_model(
            {
                "id": {
                    "target": "smithy.api#String",
                    "traits": {"smithy.api#httpLabel": {}, "smithy.api#jsonName": "ID"},
                }
            },
            shapes={
                "example.echo#Send": {
                    "type": "operation",
                    "input": {"target": "example.echo#SendRequest"},
                    "output": {"target": "example.echo#SendResponse"},
                    "errors": [{"target": "example.echo#Throttled"}],
                },
                "example.echo#Throttled": {
                    "type": "structure",
                    "members": {"message": {"target": "smithy.api#String"}},
                    "traits": {"smithy.api#error": "client"},
                },
            },
            protocol=protocol,
        )

    @pytest.mark.parametrize("protocol", ["aws.protocols#awsJson1_0", "aws.protocols#awsJson1_1"])
    def test_members_stay_in_document(self, generate_package, protocol):
        pkg = generate_package(self.aws_model(protocol))
        body = pkg.operation.SEND.serialize_request(pkg.input.SendInput(id="x"))
        assert body == b'{"id":"x"}'
        assert pkg.SERVICE.protocol == protocol

    def test_error_type_discriminator(self, generate_package):
        pkg = generate_package(self.aws_model())
        body = pkg.operation.SEND.serialize_error(pkg.error.Throttled(message="slow"))
        assert body == b'{"message":"slow","__type":"Throttled"}'
        assert pkg.operation.SEND.parse_error("Throttled", body) == pkg.error.Throttled(message="slow")

    def test_custom_customization(self, generate_package):
        from shape_to_code.pipeline import JsonSectionKind

        def add_version(section):
            if section.kind is JsonSectionKind.INPUT_STRUCT:
                return f'{section.object_name}.key("version").string("1")'
            return None

        pkg = generate_package(self.aws_model(), customizations=[add_version])
        body = pkg.operation.SEND.serialize_request(pkg.input.SendInput(id="x"))
        assert body == b'{"id":"x","version":"1"}'
