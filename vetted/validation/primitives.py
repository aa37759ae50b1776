"""Primitive Schemas

string / number / boolean / literal / enum / any / date / datetime.

Each primitive holds an ordered tuple of ``Check`` records evaluated
against a module-level ``Rule`` table, so adding a check is a table
entry plus a builder method. Type mismatches are single-shot; checks
accumulate.

Usage:
    string().trim().min(2).email()
    number().int().positive().max(150)
    boolean().coerce()
    enum_("admin", "user")
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from datetime import date as Date, datetime as DateTime
from typing import Any, Callable

from vetted.errors import Err, ErrorCode, Ok
from . import formats
from .coercion import Target, coerce as coerce_value
from .errors import Custom, InvalidString, InvalidType, NotFinite, NotInt, TooBig, TooSmall, ValidationError
from .schema import Check, MessageFn, ParseContext, ParseOutcome, Rule, Schema, run_checks, type_mismatch
from .values import MISSING, format_value_short, is_number, same_value, value_type_name

MAX_SAFE_INTEGER = 9007199254740991


def _coerced(value: Any, target: Target, coercive: bool) -> tuple[Any, str | None]:
    """Apply opt-in coercion. Returns (value, failure message or None)."""
    if not coercive or value is MISSING: return value, None
    result = coerce_value(value, target)
    if result.is_ok(): return result.value, None
    return value, result.error.message if result.error.code is ErrorCode.E2002_INVALID_FORMAT else None


def _type_issue(expected: str, value: Any, override: str | None, coercion_message: str | None) -> Err[ValidationError]:
    return type_mismatch(expected, value, override or coercion_message)


# ============================================================================
# String
# ============================================================================

def _fmt(name: str, scanner: Callable[[str], bool], message: str) -> Rule:
    return Rule(f"invalid_{name}", lambda s, _: scanner(s), lambda _: InvalidString(name), lambda _: message)


STRING_RULES: dict[str, Rule] = {
    "min": Rule("too_small", lambda s, n: len(s) >= n, lambda n: TooSmall(n),
        lambda n: f"String must be at least {n} characters"),
    "max": Rule("too_big", lambda s, n: len(s) <= n, lambda n: TooBig(n),
        lambda n: f"String must be at most {n} characters"),
    "length": Rule("invalid_length", lambda s, n: len(s) == n, lambda n: Custom("invalid_length"),
        lambda n: f"String must be exactly {n} characters"),
    "email": _fmt("email", formats.is_email, "Invalid email address"),
    "url": _fmt("url", formats.is_url, "Invalid URL"),
    "uuid": _fmt("uuid", formats.is_uuid, "Invalid UUID"),
    "regex": Rule("invalid_regex", lambda s, p: p.search(s) is not None, lambda _: InvalidString("regex"),
        lambda _: "String does not match pattern"),
    "starts_with": Rule("invalid_starts_with", lambda s, p: s.startswith(p), lambda _: InvalidString("starts_with"),
        lambda p: f'String must start with "{p}"'),
    "ends_with": Rule("invalid_ends_with", lambda s, p: s.endswith(p), lambda _: InvalidString("ends_with"),
        lambda p: f'String must end with "{p}"'),
    "contains": Rule("invalid_contains", lambda s, p: p in s, lambda _: InvalidString("contains"),
        lambda p: f'String must contain "{p}"'),
    "non_empty": Rule("non_empty", lambda s, _: bool(s), lambda _: TooSmall(1),
        lambda _: "String must not be empty"),
    "ipv4": _fmt("ipv4", formats.is_ipv4, "Invalid IPv4 address"),
    "ipv6": _fmt("ipv6", formats.is_ipv6, "Invalid IPv6 address"),
    "base64": _fmt("base64", formats.is_base64, "Invalid Base64 string"),
    "iso_date": _fmt("iso_date", formats.is_iso_date, "Invalid ISO date (expected YYYY-MM-DD)"),
    "iso_time": _fmt("iso_time", formats.is_iso_time, "Invalid ISO time"),
    "iso_datetime": _fmt("iso_datetime", formats.is_iso_datetime, "Invalid ISO datetime"),
    "hostname": _fmt("hostname", formats.is_hostname, "Invalid hostname"),
    "cuid2": _fmt("cuid2", formats.is_cuid2, "Invalid CUID2"),
    "ulid": _fmt("ulid", formats.is_ulid, "Invalid ULID"),
    "nanoid": _fmt("nanoid", formats.is_nanoid, "Invalid Nano ID"),
    "emoji": _fmt("emoji", formats.has_emoji, "String must contain an emoji"),
    "slug": _fmt("slug", formats.is_slug, "Invalid slug"),
}

_STRING_TRANSFORMS: dict[str, Callable[[str], str]] = {
    "trim": str.strip,
    "lower": str.lower,
    "upper": str.upper,
}


@dataclass(frozen=True, slots=True)
class StringSchema(Schema):
    """String node: transforms (trim/case) run first, then every check."""
    checks: tuple[Check, ...] = ()
    transforms: tuple[str, ...] = ()
    coercive: bool = False
    type_message: str | None = None
    messages: MessageFn | None = None

    def _add(self, kind: str, arg: Any = None, message: str | None = None) -> StringSchema:
        return replace(self, checks=(*self.checks, Check(kind, arg, message)))

    def min(self, n: int, message: str | None = None) -> StringSchema: return self._add("min", n, message)

    def max(self, n: int, message: str | None = None) -> StringSchema: return self._add("max", n, message)

    def length(self, n: int, message: str | None = None) -> StringSchema: return self._add("length", n, message)

    def email(self, message: str | None = None) -> StringSchema: return self._add("email", None, message)

    def url(self, message: str | None = None) -> StringSchema: return self._add("url", None, message)

    def uuid(self, message: str | None = None) -> StringSchema: return self._add("uuid", None, message)

    def regex(self, pattern: str | re.Pattern, message: str | None = None) -> StringSchema:
        return self._add("regex", re.compile(pattern) if isinstance(pattern, str) else pattern, message)

    def starts_with(self, prefix: str, message: str | None = None) -> StringSchema:
        return self._add("starts_with", prefix, message)

    def ends_with(self, suffix: str, message: str | None = None) -> StringSchema:
        return self._add("ends_with", suffix, message)

    def contains(self, needle: str, message: str | None = None) -> StringSchema:
        return self._add("contains", needle, message)

    def non_empty(self, message: str | None = None) -> StringSchema: return self._add("non_empty", None, message)

    def ipv4(self, message: str | None = None) -> StringSchema: return self._add("ipv4", None, message)

    def ipv6(self, message: str | None = None) -> StringSchema: return self._add("ipv6", None, message)

    def base64(self, message: str | None = None) -> StringSchema: return self._add("base64", None, message)

    def iso_date(self, message: str | None = None) -> StringSchema: return self._add("iso_date", None, message)

    def iso_time(self, message: str | None = None) -> StringSchema: return self._add("iso_time", None, message)

    def iso_datetime(self, message: str | None = None) -> StringSchema:
        return self._add("iso_datetime", None, message)

    def hostname(self, message: str | None = None) -> StringSchema: return self._add("hostname", None, message)

    def cuid2(self, message: str | None = None) -> StringSchema: return self._add("cuid2", None, message)

    def ulid(self, message: str | None = None) -> StringSchema: return self._add("ulid", None, message)

    def nanoid(self, message: str | None = None) -> StringSchema: return self._add("nanoid", None, message)

    def emoji(self, message: str | None = None) -> StringSchema: return self._add("emoji", None, message)

    def slug(self, message: str | None = None) -> StringSchema: return self._add("slug", None, message)

    def trim(self) -> StringSchema: return replace(self, transforms=(*self.transforms, "trim"))

    def to_lowercase(self) -> StringSchema: return replace(self, transforms=(*self.transforms, "lower"))

    def to_uppercase(self) -> StringSchema: return replace(self, transforms=(*self.transforms, "upper"))

    def coerce(self) -> StringSchema: return replace(self, coercive=True)

    def type_error(self, message: str) -> StringSchema: return replace(self, type_message=message)

    def with_messages(self, fn: MessageFn) -> StringSchema: return replace(self, messages=fn)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        value, coercion_message = _coerced(value, "string", self.coercive)
        if not isinstance(value, str):
            return _type_issue("string", value, self.type_message, coercion_message)
        for name in self.transforms: value = _STRING_TRANSFORMS[name](value)
        errors = run_checks(value, self.checks, STRING_RULES, self.messages, value)
        return Err(errors) if errors else Ok(value)

    def default_value(self) -> Any: return ""


# ============================================================================
# Number
# ============================================================================

NUMBER_RULES: dict[str, Rule] = {
    "min": Rule("too_small", lambda n, v: n >= v, lambda v: TooSmall(v, True),
        lambda v: f"Number must be at least {format_value_short(v)}"),
    "max": Rule("too_big", lambda n, v: n <= v, lambda v: TooBig(v, True),
        lambda v: f"Number must be at most {format_value_short(v)}"),
    "gt": Rule("too_small", lambda n, v: n > v, lambda v: TooSmall(v, False),
        lambda v: f"Number must be greater than {format_value_short(v)}"),
    "lt": Rule("too_big", lambda n, v: n < v, lambda v: TooBig(v, False),
        lambda v: f"Number must be less than {format_value_short(v)}"),
    "positive": Rule("not_positive", lambda n, _: n > 0, lambda _: TooSmall(0, False),
        lambda _: "Number must be positive"),
    "negative": Rule("not_negative", lambda n, _: n < 0, lambda _: TooBig(0, False),
        lambda _: "Number must be negative"),
    "non_negative": Rule("not_non_negative", lambda n, _: n >= 0, lambda _: TooSmall(0, True),
        lambda _: "Number must be non-negative"),
    "non_positive": Rule("not_non_positive", lambda n, _: n <= 0, lambda _: TooBig(0, True),
        lambda _: "Number must be non-positive"),
    "finite": Rule("not_finite", lambda n, _: math.isfinite(n), lambda _: NotFinite(),
        lambda _: "Number must be finite"),
    "multiple_of": Rule("not_multiple_of", lambda n, v: abs(math.fmod(n, v)) <= 1e-10,
        lambda _: Custom("not_multiple_of"), lambda v: f"Number must be a multiple of {format_value_short(v)}"),
    "safe": Rule("not_safe", lambda n, _: -MAX_SAFE_INTEGER <= n <= MAX_SAFE_INTEGER,
        lambda _: Custom("not_safe"), lambda _: "Number must be a safe integer (-(2^53-1) to 2^53-1)"),
}


@dataclass(frozen=True, slots=True)
class NumberSchema(Schema):
    """Number node; ``int()`` narrows to whole numbers and yields ``int``."""
    checks: tuple[Check, ...] = ()
    integer: bool = False
    coercive: bool = False
    type_message: str | None = None
    int_message: str | None = None
    messages: MessageFn | None = None

    def _add(self, kind: str, arg: Any = None, message: str | None = None) -> NumberSchema:
        return replace(self, checks=(*self.checks, Check(kind, arg, message)))

    def min(self, v: float, message: str | None = None) -> NumberSchema: return self._add("min", v, message)

    def max(self, v: float, message: str | None = None) -> NumberSchema: return self._add("max", v, message)

    def gte(self, v: float, message: str | None = None) -> NumberSchema: return self._add("min", v, message)

    def lte(self, v: float, message: str | None = None) -> NumberSchema: return self._add("max", v, message)

    def gt(self, v: float, message: str | None = None) -> NumberSchema: return self._add("gt", v, message)

    def lt(self, v: float, message: str | None = None) -> NumberSchema: return self._add("lt", v, message)

    def positive(self, message: str | None = None) -> NumberSchema: return self._add("positive", None, message)

    def negative(self, message: str | None = None) -> NumberSchema: return self._add("negative", None, message)

    def non_negative(self, message: str | None = None) -> NumberSchema:
        return self._add("non_negative", None, message)

    def non_positive(self, message: str | None = None) -> NumberSchema:
        return self._add("non_positive", None, message)

    def finite(self, message: str | None = None) -> NumberSchema: return self._add("finite", None, message)

    def multiple_of(self, v: float, message: str | None = None) -> NumberSchema:
        if v == 0: raise ValueError("multiple_of requires a non-zero divisor")
        return self._add("multiple_of", v, message)

    def safe(self, message: str | None = None) -> NumberSchema: return self._add("safe", None, message)

    def int(self) -> NumberSchema: return replace(self, integer=True)

    def coerce(self) -> NumberSchema: return replace(self, coercive=True)

    def type_error(self, message: str) -> NumberSchema: return replace(self, type_message=message)

    def int_error(self, message: str) -> NumberSchema: return replace(self, int_message=message)

    def with_messages(self, fn: MessageFn) -> NumberSchema:
        if self.integer and (text := fn("not_int")): return replace(self, messages=fn, int_message=text)
        return replace(self, messages=fn)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        value, coercion_message = _coerced(value, "number", self.coercive)
        if not is_number(value):
            return _type_issue("number", value, self.type_message, coercion_message)
        if self.integer:
            if isinstance(value, float) and not value.is_integer():
                return Err(ValidationError.single(NotInt(), self.int_message or "Expected integer, received float", value))
        errors = run_checks(value, self.checks, NUMBER_RULES, self.messages, value)
        if errors: return Err(errors)
        return Ok(int(value) if self.integer else value)

    def default_value(self) -> Any: return 0


# ============================================================================
# Boolean / Literal / Enum / Any
# ============================================================================

@dataclass(frozen=True, slots=True)
class BooleanSchema(Schema):
    coercive: bool = False
    type_message: str | None = None

    def coerce(self) -> BooleanSchema: return replace(self, coercive=True)

    def type_error(self, message: str) -> BooleanSchema: return replace(self, type_message=message)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        value, coercion_message = _coerced(value, "boolean", self.coercive)
        if not isinstance(value, bool):
            return _type_issue("boolean", value, self.type_message, coercion_message)
        return Ok(value)

    def default_value(self) -> Any: return False


@dataclass(frozen=True, slots=True)
class LiteralSchema(Schema):
    """Exactly one allowed value (bool and number never compare equal)."""
    expected: Any = None

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if same_value(value, self.expected): return Ok(value)
        if value is MISSING: return type_mismatch("literal", value)
        return Err(ValidationError.single(Custom("invalid_literal"),
            f"Expected literal {format_value_short(self.expected)}, received {format_value_short(value)}",
            value))

    def default_value(self) -> Any: return self.expected


@dataclass(frozen=True, slots=True)
class EnumSchema(Schema):
    """One of a fixed set of strings."""
    variants: tuple[str, ...] = ()
    type_message: str | None = None

    def type_error(self, message: str) -> EnumSchema: return replace(self, type_message=message)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, str): return type_mismatch("string", value, self.type_message)
        if value in self.variants: return Ok(value)
        expected = ", ".join(f'"{v}"' for v in self.variants)
        return Err(ValidationError.single(Custom("invalid_enum_value"),
            f'Invalid enum value: "{value}". Expected one of: {expected}', value))

    def default_value(self) -> Any: return self.variants[0]


@dataclass(frozen=True, slots=True)
class AnySchema(Schema):
    """Accepts anything; an absent value becomes None."""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        return Ok(None if value is MISSING else value)


# ============================================================================
# Date / DateTime
# ============================================================================

DATE_RULES: dict[str, Rule] = {
    "min": Rule("too_small", lambda d, v: d >= v, lambda _: TooSmall(0, True),
        lambda v: f"Date must be on or after {v.isoformat()}"),
    "max": Rule("too_big", lambda d, v: d <= v, lambda _: TooBig(0, True),
        lambda v: f"Date must be on or before {v.isoformat()}"),
}


def _as_date(d: Date | str) -> Date:
    return Date.fromisoformat(d) if isinstance(d, str) else d


@dataclass(frozen=True, slots=True)
class DateSchema(Schema):
    """``YYYY-MM-DD`` string (or ``datetime.date``) parsed into ``datetime.date``."""
    checks: tuple[Check, ...] = ()
    type_message: str | None = None

    def min(self, d: Date | str, message: str | None = None) -> DateSchema:
        return replace(self, checks=(*self.checks, Check("min", _as_date(d), message)))

    def max(self, d: Date | str, message: str | None = None) -> DateSchema:
        return replace(self, checks=(*self.checks, Check("max", _as_date(d), message)))

    def type_error(self, message: str) -> DateSchema: return replace(self, type_message=message)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if isinstance(value, Date) and not isinstance(value, DateTime):
            parsed = value
        elif isinstance(value, str):
            try:
                if not formats.is_iso_date(value): raise ValueError(value)
                parsed = Date.fromisoformat(value)
            except ValueError:
                return Err(ValidationError.single(Custom("invalid_date"),
                    f'Invalid date format: expected YYYY-MM-DD, got "{value}"', value))
        else:
            if value is MISSING: return type_mismatch("string (date)", value)
            received = value_type_name(value)
            return Err(ValidationError.single(InvalidType("string (date)", received),
                self.type_message or f"Expected date string (YYYY-MM-DD), received {received}", value))
        errors = run_checks(parsed, self.checks, DATE_RULES, None, value)
        return Err(errors) if errors else Ok(parsed)

    def default_value(self) -> Any: return Date(1970, 1, 1)


@dataclass(frozen=True, slots=True)
class DateTimeSchema(Schema):
    """ISO 8601 datetime string (or ``datetime``) parsed into ``datetime.datetime``."""
    type_message: str | None = None

    def type_error(self, message: str) -> DateTimeSchema: return replace(self, type_message=message)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if isinstance(value, DateTime): return Ok(value)
        if not isinstance(value, str):
            if value is MISSING: return type_mismatch("string (datetime)", value)
            received = value_type_name(value)
            return Err(ValidationError.single(InvalidType("string (datetime)", received),
                self.type_message or f"Expected datetime string (ISO 8601), received {received}", value))
        try:
            if not formats.is_iso_datetime(value): raise ValueError(value)
            return Ok(DateTime.fromisoformat(value))
        except ValueError:
            return Err(ValidationError.single(Custom("invalid_datetime"),
                f'Invalid datetime format: expected ISO 8601, got "{value}"', value))

    def default_value(self) -> Any: return DateTime(1970, 1, 1)


# ============================================================================
# Constructors
# ============================================================================

def string() -> StringSchema: return StringSchema()


def number() -> NumberSchema: return NumberSchema()


def boolean() -> BooleanSchema: return BooleanSchema()


def literal(value: Any) -> LiteralSchema: return LiteralSchema(value)


def enum_(*variants: str) -> EnumSchema:
    if not variants: raise ValueError("enum_ requires at least one variant")
    return EnumSchema(tuple(variants))


def any_() -> AnySchema: return AnySchema()


def date() -> DateSchema: return DateSchema()


def datetime() -> DateTimeSchema: return DateTimeSchema()
