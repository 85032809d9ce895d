import pytest

from user_records_api.app.core.errors import RecordValidationError
from user_records_api.app.schemas.fields import (
    DEFAULT_VARIANT,
    NUMBER,
    SCHEMA_VARIANTS,
    STRING,
    FieldDescriptor,
    is_identifier,
    parse_fields,
    resolve_fields,
)
from user_records_api.app.schemas.user import UserPayloads
from user_records_api.app.services.user_service import parse_user_id


def test_default_variant_matches_current_table():
    names = [field.name for field in resolve_fields(DEFAULT_VARIANT)]
    assert names == ["name", "age", "occupation"]


def test_every_variant_has_a_numeric_age():
    for fields in SCHEMA_VARIANTS.values():
        age = [field for field in fields if field.name == "age"]
        assert len(age) == 1
        assert age[0].kind == NUMBER


def test_parse_compact_field_list():
    fields = parse_fields("name:string, age:number, address2?")
    assert fields == (
        FieldDescriptor("name", STRING),
        FieldDescriptor("age", NUMBER),
        FieldDescriptor("address2", STRING, required=False),
    )


def test_resolve_accepts_field_list():
    assert [f.name for f in resolve_fields("fname:string,lname:string")] == ["fname", "lname"]


@pytest.mark.parametrize(
    "spec",
    ["", "name:string,name:number", "age:integer", "id:number", "first name:string"],
)
def test_parse_rejects_bad_field_lists(spec):
    with pytest.raises(ValueError):
        parse_fields(spec)


def test_resolve_rejects_unknown_variant():
    with pytest.raises(ValueError, match="Unknown user schema"):
        resolve_fields("age1_only")


def test_is_identifier():
    assert is_identifier("users")
    assert is_identifier("nameF")
    assert not is_identifier("users; DROP TABLE users")
    assert not is_identifier("1users")
    assert not is_identifier("users\n")


# ---------------------------------------------------------------------------
# Payload validation
# ---------------------------------------------------------------------------

@pytest.fixture
def payloads():
    return UserPayloads(SCHEMA_VARIANTS["name_age_address2"])


def test_create_fills_absent_optional_fields(payloads):
    values = payloads.for_create({"name": "Ann", "age": 30, "address": "Main St"})
    assert values == {"name": "Ann", "age": 30, "address": "Main St", "address2": None}


def test_create_keeps_integer_type(payloads):
    values = payloads.for_create({"name": "Ann", "age": 30, "address": "x"})
    assert isinstance(values["age"], int)


@pytest.mark.parametrize("age", [float("inf"), float("nan"), "30", None, False])
def test_number_must_be_finite_number(payloads, age):
    with pytest.raises(RecordValidationError) as excinfo:
        payloads.for_create({"name": "Ann", "age": age, "address": "x"})
    assert excinfo.value.field == "age"


def test_patch_returns_fields_in_declaration_order(payloads):
    values = payloads.for_patch({"address2": "Apt 1", "name": "Ann"})
    assert list(values) == ["name", "address2"]


def test_patch_allows_clearing_optional_field(payloads):
    assert payloads.for_patch({"address2": None}) == {"address2": None}


def test_optional_string_may_be_empty(payloads):
    values = payloads.for_create({"name": "Ann", "age": 30, "address": "x", "address2": ""})
    assert values["address2"] == ""
    assert payloads.for_patch({"address2": ""}) == {"address2": ""}


def test_required_string_may_not_be_empty(payloads):
    with pytest.raises(RecordValidationError) as excinfo:
        payloads.for_replace({"name": " ", "age": 30, "address": "x"})
    assert excinfo.value.field == "name"


def test_patch_requires_a_field(payloads):
    with pytest.raises(RecordValidationError, match="at least one field required"):
        payloads.for_patch({"id": 3})


def test_non_object_body(payloads):
    with pytest.raises(RecordValidationError) as excinfo:
        payloads.for_replace(None)
    assert excinfo.value.field == "body"


# ---------------------------------------------------------------------------
# Identifier parsing
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [("10", 10), ("-2", -2), ("007", 7), (5, 5)])
def test_parse_user_id_accepts_plain_integers(raw, expected):
    assert parse_user_id(raw) == expected


@pytest.mark.parametrize("raw", ["1_0", "+3", "٣", " 1", "1.0", "", None, True])
def test_parse_user_id_rejects_everything_else(raw):
    with pytest.raises(RecordValidationError) as excinfo:
        parse_user_id(raw)
    assert excinfo.value.field == "id"
