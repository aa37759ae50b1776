"""Tests for object_ validation, unknown-key policies and graph transforms."""

import pytest

from vetted import (
    EnumSchema,
    Field,
    InvalidType,
    MissingField,
    ObjectSchema,
    OptionalSchema,
    RequiredSchema,
    UnrecognizedField,
    boolean,
    literal,
    number,
    object_,
    string,
)


class TestObjectValidation:
    def test_two_failing_fields_two_issues(self):
        schema = object_({"name": string().min(2).max(50), "email": string().email()})
        result = schema.parse_result({"name": "A", "email": "bad"})
        assert len(result.error) == 2
        assert [i.path_str for i in result.error] == [".name", ".email"]

    def test_valid_input_round_trips(self, user_schema):
        data = {"name": "Ada", "email": "ada@example.com", "age": 36}
        assert user_schema.parse(data) == data

    def test_absent_key_is_missing_field(self):
        issue = object_({"name": string()}).parse_result({}).error.issues[0]
        assert issue.code == MissingField()
        assert issue.path == (Field("name"),)

    def test_null_is_not_absent(self):
        issue = object_({"name": string()}).parse_result({"name": None}).error.issues[0]
        assert issue.code == InvalidType("string", "null")

    def test_non_object_single_issue(self):
        result = object_({"a": string(), "b": string()}).parse_result([1, 2])
        assert len(result.error) == 1
        assert result.error.issues[0].message == "Expected object, received array"

    def test_optional_absent_field_is_none(self, user_schema):
        assert user_schema.parse({"name": "Ada", "email": "ada@example.com"})["age"] is None


class TestUnknownKeys:
    data = {"name": "Ada", "extra": 1}

    def test_strip_is_default(self):
        assert object_({"name": string()}).parse(self.data) == {"name": "Ada"}

    def test_strict(self):
        issue = object_({"name": string()}).strict().parse_result(self.data).error.issues[0]
        assert issue.code == UnrecognizedField("extra")
        assert issue.message == 'Unrecognized field: "extra"'
        assert issue.path == (Field("extra"),)

    def test_passthrough(self):
        assert object_({"name": string()}).passthrough().parse(self.data) == self.data

    def test_catchall(self):
        schema = object_({"name": string()}).catchall(number().positive())
        assert schema.parse(self.data) == self.data
        issue = schema.parse_result({"name": "Ada", "extra": -1}).error.issues[0]
        assert issue.path == (Field("extra"),)


class TestConditional:
    schema = object_({
        "contact": string(),
        "email": string().optional(),
    }).when("contact", "email", "email", string().email())

    def test_condition_met_checks_target(self):
        issue = self.schema.parse_result({"contact": "email"}).error.issues[0]
        assert issue.path == (Field("email"),)
        assert issue.code == MissingField()

    def test_condition_not_met(self):
        assert self.schema.parse({"contact": "phone"}) == {"contact": "phone", "email": None}

    def test_condition_passes(self):
        assert self.schema.parse({"contact": "email", "email": "a@b.co"})["email"] == "a@b.co"


class TestGraphTransforms:
    base = object_({"name": string(), "age": number(), "admin": boolean()})

    def test_pick_and_omit(self):
        assert list(self.base.pick("name", "age").shape) == ["name", "age"]
        assert list(self.base.omit("admin").shape) == ["name", "age"]

    def test_extend_right_wins(self):
        extended = self.base.extend({"age": string(), "email": string()})
        assert extended.parse({"name": "a", "age": "old", "admin": True, "email": "e"})["age"] == "old"

    def test_merge(self):
        merged = self.base.merge(object_({"role": literal("admin")}))
        assert "role" in merged.shape and "name" in merged.shape

    def test_partial(self):
        assert self.base.partial().parse({}) == {"name": None, "age": None, "admin": None}
        some = self.base.partial("age")
        assert isinstance(some.shape["age"], OptionalSchema)
        assert not isinstance(some.shape["name"], OptionalSchema)

    def test_required(self):
        schema = object_({"nick": string().optional(), "bio": string().default("")}).required()
        assert all(isinstance(s, RequiredSchema) for s in schema.shape.values())
        issues = schema.parse_result({"nick": None}).error.issues
        assert [i.message for i in issues] == ["Required field is missing or null"] * 2

    def test_deep_partial(self):
        schema = object_({"user": object_({"name": string(), "tags": string()})}).deep_partial()
        assert schema.parse({"user": {}}) == {"user": {"name": None, "tags": None}}
        assert schema.parse({}) == {"user": None}

    def test_keyof(self):
        keys = self.base.keyof()
        assert isinstance(keys, EnumSchema)
        assert keys.parse("age") == "age"
        assert keys.parse_result("email").is_err()

    def test_field_optional(self):
        assert self.base.field_optional("admin").parse({"name": "a", "age": 1})["admin"] is None
        with pytest.raises(KeyError):
            self.base.field_optional("missing")

    def test_transforms_return_new_schema(self):
        picked = self.base.pick("name")
        assert isinstance(picked, ObjectSchema)
        assert len(self.base.shape) == 3
