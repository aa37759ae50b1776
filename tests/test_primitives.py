"""Tests for primitive schemas: string, number, boolean, literal, enum, any, date."""

import datetime as dt
import math

import pytest

from vetted import (
    Custom,
    InvalidString,
    InvalidType,
    MISSING,
    MissingField,
    NotFinite,
    NotInt,
    TooBig,
    TooSmall,
    ValidationError,
    any_,
    boolean,
    date,
    datetime,
    enum_,
    literal,
    number,
    string,
)


def issues_of(schema, value):
    result = schema.parse_result(value)
    assert result.is_err(), f"expected failure for {value!r}"
    return result.error.issues


class TestStringType:
    """Type checking is single-shot."""

    def test_accepts_string(self):
        assert string().parse("hello") == "hello"

    def test_rejects_number_with_one_issue(self):
        issues = issues_of(string().min(3).email(), 42)
        assert len(issues) == 1
        assert issues[0].code == InvalidType("string", "number")
        assert issues[0].message == "Expected string, received number"
        assert issues[0].received == 42

    def test_type_error_override(self):
        issues = issues_of(string().type_error("Name must be text"), None)
        assert issues[0].message == "Name must be text"

    def test_missing_value_is_missing_field(self):
        issues = issues_of(string(), MISSING)
        assert issues[0].code == MissingField()
        assert issues[0].message == "Required field is missing"
        assert not issues[0].has_received


class TestStringChecks:
    """Every failing check accumulates."""

    def test_min_and_email_both_reported(self):
        issues = issues_of(string().min(5).email(), "bad")
        assert [i.code for i in issues] == [TooSmall(5), InvalidString("email")]
        assert issues[0].message == "String must be at least 5 characters"
        assert issues[1].message == "Invalid email address"

    def test_max_and_length(self):
        assert issues_of(string().max(2), "abc")[0].message == "String must be at most 2 characters"
        issue = issues_of(string().length(4), "abc")[0]
        assert issue.code == Custom("invalid_length")
        assert issue.message == "String must be exactly 4 characters"

    @pytest.mark.parametrize("method,good,bad", [
        ("email", "ada@example.com", "ada@"),
        ("url", "https://example.com/x", "ftp://example.com"),
        ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123e4567"),
        ("ipv4", "192.168.0.1", "256.1.1.1"),
        ("ipv6", "2001:db8::1", "2001:db8:::1"),
        ("base64", "aGVsbG8=", "aGVsbG8"),
        ("iso_date", "2024-02-29", "2024-13-01"),
        ("iso_time", "23:59:59.123", "24:00"),
        ("iso_datetime", "2024-01-01T10:00:00Z", "2024-01-01 10:00"),
        ("hostname", "api.example.com", "-bad.example.com"),
        ("cuid2", "tz4a98xxat96iws9zmbrgj3a", "Tz4a98"),
        ("ulid", "01ARZ3NDEKTSV4RRFFQ69G5FAV", "01ARZ3NDEKTSV4RRFFQ69G5FAVX"),
        ("nanoid", "V1StGXR8_Z5jdHi6B-myT", "V1St GXR8"),
        ("emoji", "nice 👍", "plain text"),
        ("slug", "hello-world-2", "Hello--World"),
    ])
    def test_format_checks(self, method, good, bad):
        schema = getattr(string(), method)()
        assert schema.parse(good) == good
        issues = issues_of(schema, bad)
        assert len(issues) == 1
        assert issues[0].code == InvalidString(method)

    def test_regex_uses_search(self):
        schema = string().regex(r"\d{3}", "Needs three digits")
        assert schema.parse("ab123") == "ab123"
        assert issues_of(schema, "ab12")[0].message == "Needs three digits"

    def test_affix_checks(self):
        schema = string().starts_with("ab").ends_with("yz").contains("mm")
        assert schema.parse("abmmyz") == "abmmyz"
        messages = [i.message for i in issues_of(schema, "xx")]
        assert messages == ['String must start with "ab"', 'String must end with "yz"', 'String must contain "mm"']

    def test_non_empty(self):
        assert issues_of(string().non_empty(), "")[0].message == "String must not be empty"

    def test_explicit_message_beats_with_messages(self):
        schema = string().min(3, "Too short!").email().with_messages(
            lambda key: {"too_small": "ignored", "invalid_email": "Bad mail"}.get(key))
        assert [i.message for i in issues_of(schema, "x")] == ["Too short!", "Bad mail"]


class TestStringTransforms:
    def test_trim_runs_before_checks(self):
        schema = string().trim().min(3)
        assert schema.parse("  abc  ") == "abc"
        assert len(issues_of(schema, "  ab  ")) == 1

    def test_case_transforms(self):
        assert string().to_lowercase().parse("HeLLo") == "hello"
        assert string().trim().to_uppercase().parse(" ok ") == "OK"

    def test_builders_do_not_mutate(self):
        base = string()
        base.min(10)
        assert base.parse("a") == "a"


class TestNumber:
    def test_rejects_bool(self):
        assert issues_of(number(), True)[0].code == InvalidType("number", "boolean")

    def test_bounds(self):
        schema = number().min(1).max(10)
        assert schema.parse(5) == 5
        assert issues_of(schema, 0)[0].message == "Number must be at least 1"
        assert issues_of(schema, 11)[0].message == "Number must be at most 10"

    def test_exclusive_bounds(self):
        schema = number().gt(0).lt(1)
        assert schema.parse(0.5) == 0.5
        issue = issues_of(schema, 0)[0]
        assert issue.code == TooSmall(0, False)
        assert issue.message == "Number must be greater than 0"
        assert issues_of(schema, 1)[0].code == TooBig(1, False)

    def test_sign_checks(self):
        assert issues_of(number().positive(), 0)[0].message == "Number must be positive"
        assert issues_of(number().negative(), 0)[0].message == "Number must be negative"
        assert issues_of(number().non_negative(), -1)[0].message == "Number must be non-negative"
        assert issues_of(number().non_positive(), 1)[0].message == "Number must be non-positive"

    def test_finite(self):
        assert issues_of(number().finite(), math.inf)[0].code == NotFinite()

    def test_multiple_of(self):
        assert number().multiple_of(5).parse(15) == 15
        assert issues_of(number().multiple_of(5), 7)[0].message == "Number must be a multiple of 5"
        with pytest.raises(ValueError):
            number().multiple_of(0)

    def test_safe(self):
        assert issues_of(number().safe(), 2 ** 60)[0].code == Custom("not_safe")

    def test_checks_accumulate(self):
        assert len(issues_of(number().positive().multiple_of(2), -3)) == 2


class TestInteger:
    def test_whole_float_becomes_int(self):
        value = number().int().parse(3.0)
        assert value == 3 and isinstance(value, int)

    def test_fraction_is_single_not_int_issue(self):
        issues = issues_of(number().int().positive(), -2.5)
        assert len(issues) == 1
        assert issues[0].code == NotInt()
        assert issues[0].message == "Expected integer, received float"

    def test_int_error_override(self):
        assert issues_of(number().int().int_error("Whole numbers only"), 1.5)[0].message == "Whole numbers only"


class TestBooleanLiteralEnumAny:
    def test_boolean(self):
        assert boolean().parse(False) is False
        assert issues_of(boolean(), 0)[0].code == InvalidType("boolean", "number")

    def test_literal(self):
        assert literal("admin").parse("admin") == "admin"
        issue = issues_of(literal("admin"), "user")[0]
        assert issue.code == Custom("invalid_literal")
        assert issue.message == 'Expected literal "admin", received "user"'

    def test_literal_bool_is_not_number(self):
        assert literal(1).parse_result(True).is_err()
        assert literal(True).parse(True) is True

    def test_enum(self):
        schema = enum_("admin", "user")
        assert schema.parse("user") == "user"
        issue = issues_of(schema, "root")[0]
        assert issue.code == Custom("invalid_enum_value")
        assert issue.message == 'Invalid enum value: "root". Expected one of: "admin", "user"'
        assert issues_of(schema, 1)[0].code == InvalidType("string", "number")

    def test_enum_requires_variants(self):
        with pytest.raises(ValueError):
            enum_()

    def test_any(self):
        assert any_().parse({"x": [1]}) == {"x": [1]}
        assert any_().parse(MISSING) is None


class TestDates:
    def test_date_parses(self):
        assert date().parse("2024-02-29") == dt.date(2024, 2, 29)

    def test_date_bad_format(self):
        issue = issues_of(date(), "2024-02-31")[0]
        assert issue.code == Custom("invalid_date")
        assert issue.message == 'Invalid date format: expected YYYY-MM-DD, got "2024-02-31"'

    def test_date_type_error(self):
        issue = issues_of(date(), 20240101)[0]
        assert issue.message == "Expected date string (YYYY-MM-DD), received number"

    def test_date_bounds(self):
        schema = date().min("2024-01-01").max(dt.date(2024, 12, 31))
        assert issues_of(schema, "2023-12-31")[0].message == "Date must be on or after 2024-01-01"
        assert issues_of(schema, "2025-01-01")[0].message == "Date must be on or before 2024-12-31"

    def test_datetime(self):
        value = datetime().parse("2024-01-01T10:30:00+02:00")
        assert value.hour == 10 and value.utcoffset() == dt.timedelta(hours=2)
        assert issues_of(datetime(), "yesterday")[0].code == Custom("invalid_datetime")


class TestErrorIsException:
    def test_parse_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            string().min(2).parse("a")
        assert len(exc_info.value) == 1
