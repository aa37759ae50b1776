"""Collection Schemas

array / tuple_ / record / map_ / set_.

Size checks run before element validation; every element is validated
and its issues are prefixed with the element's path segment, so one
pass reports every failing position.

Usage:
    array(string().min(1)).non_empty()
    tuple_(string(), number())
    record(number().int()).max_keys(10)
    set_(string()).unique_items()
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from vetted.errors import Err, MalformedInput, Ok
from .errors import Custom, Field, Index, TooBig, TooSmall, ValidationError
from .schema import Check, ParseContext, ParseOutcome, Rule, Schema, run_checks, type_mismatch
from .values import MISSING, canonical_text, value_type_name

MAX_TUPLE_ARITY = 6

ARRAY_RULES: dict[str, Rule] = {
    "min_len": Rule("too_small", lambda n, v: n >= v, lambda v: TooSmall(v),
        lambda v: f"Array must have at least {v} elements"),
    "max_len": Rule("too_big", lambda n, v: n <= v, lambda v: TooBig(v),
        lambda v: f"Array must have at most {v} elements"),
    "length": Rule("invalid_length", lambda n, v: n == v, lambda _: Custom("invalid_length"),
        lambda v: f"Array must have exactly {v} elements"),
}

RECORD_RULES: dict[str, Rule] = {
    "min_keys": Rule("too_small", lambda n, v: n >= v, lambda v: TooSmall(v),
        lambda v: f"Record must have at least {v} keys"),
    "max_keys": Rule("too_big", lambda n, v: n <= v, lambda v: TooBig(v),
        lambda v: f"Record must have at most {v} keys"),
}

SET_RULES: dict[str, Rule] = {
    "min_size": Rule("too_small", lambda n, v: n >= v, lambda v: TooSmall(v),
        lambda v: f"Set must have at least {v} unique elements"),
    "max_size": Rule("too_big", lambda n, v: n <= v, lambda v: TooBig(v),
        lambda v: f"Set must have at most {v} unique elements"),
}


def _run_elements(schema: Schema, items: list, ctx: ParseContext, errors: ValidationError) -> list:
    """Validate every element, prefixing issues with ``Index(i)``."""
    out = []
    for i, item in enumerate(items):
        result = schema.run(item, ctx)
        if result.is_ok(): out.append(result.value)
        else: errors.extend(result.error.with_prefix(Index(i)))
    return out


@dataclass(frozen=True, slots=True)
class ArraySchema(Schema):
    element: Schema
    checks: tuple[Check, ...] = ()

    def _add(self, kind: str, n: int, message: str | None) -> ArraySchema:
        return replace(self, checks=(*self.checks, Check(kind, n, message)))

    def min_len(self, n: int, message: str | None = None) -> ArraySchema: return self._add("min_len", n, message)

    def max_len(self, n: int, message: str | None = None) -> ArraySchema: return self._add("max_len", n, message)

    def length(self, n: int, message: str | None = None) -> ArraySchema: return self._add("length", n, message)

    def non_empty(self, message: str | None = None) -> ArraySchema: return self._add("min_len", 1, message)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, list): return type_mismatch("array", value)
        errors = run_checks(len(value), self.checks, ARRAY_RULES, None, value)
        out = _run_elements(self.element, value, ctx, errors)
        return Err(errors) if errors else Ok(out)

    def default_value(self) -> Any: return []


@dataclass(frozen=True, slots=True)
class TupleSchema(Schema):
    """Fixed-arity positional sequence; output is a ``tuple``."""
    items: tuple[Schema, ...]

    def __post_init__(self):
        if not 1 <= len(self.items) <= MAX_TUPLE_ARITY:
            raise ValueError(f"tuple_ takes 1 to {MAX_TUPLE_ARITY} schemas, got {len(self.items)}")

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, list):
            return type_mismatch("array", value, f"Expected array (tuple), received {value_type_name(value)}")
        if len(value) != len(self.items):
            return Err(ValidationError.single(Custom("invalid_tuple_length"),
                f"Expected tuple of {len(self.items)} elements, received {len(value)}", value))
        errors, out = ValidationError(), []
        for i, (schema, item) in enumerate(zip(self.items, value)):
            result = schema.run(item, ctx)
            if result.is_ok(): out.append(result.value)
            else: errors.extend(result.error.with_prefix(Index(i)))
        return Err(errors) if errors else Ok(tuple(out))

    def default_value(self) -> Any: return tuple(s.default_value() for s in self.items)


@dataclass(frozen=True, slots=True)
class RecordSchema(Schema):
    """Object with arbitrary string keys and homogeneous values."""
    value_schema: Schema
    key_schema: Schema | None = None
    checks: tuple[Check, ...] = ()

    def keys(self, schema: Schema) -> RecordSchema: return replace(self, key_schema=schema)

    def min_keys(self, n: int, message: str | None = None) -> RecordSchema:
        return replace(self, checks=(*self.checks, Check("min_keys", n, message)))

    def max_keys(self, n: int, message: str | None = None) -> RecordSchema:
        return replace(self, checks=(*self.checks, Check("max_keys", n, message)))

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, dict): return type_mismatch("object", value)
        errors = run_checks(len(value), self.checks, RECORD_RULES, None, MISSING)
        out: dict[str, Any] = {}
        for key, item in value.items():
            if self.key_schema is not None and (k := self.key_schema.run(key, ctx)).is_err():
                errors.extend(k.error.with_prefix(Field(key)))
            result = self.value_schema.run(item, ctx)
            if result.is_ok(): out[key] = result.value
            else: errors.extend(result.error.with_prefix(Field(key)))
        return Err(errors) if errors else Ok(out)

    def default_value(self) -> Any: return {}


@dataclass(frozen=True, slots=True)
class MapSchema(Schema):
    """List of ``[key, value]`` pairs; output is a list of tuples."""
    key_schema: Schema
    value_schema: Schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, list):
            return type_mismatch("array", value, f"Expected array of [key, value] pairs, received {value_type_name(value)}")
        errors, out = ValidationError(), []
        for i, entry in enumerate(value):
            if not isinstance(entry, list) or len(entry) != 2:
                errors.push(Custom("invalid_map_entry"), "Each Map entry must be a [key, value] array of length 2",
                    entry, (Index(i),))
                continue
            key, item = self.key_schema.run(entry[0], ctx), self.value_schema.run(entry[1], ctx)
            for result in (key, item):
                if result.is_err(): errors.extend(result.error.with_prefix(Index(i)))
            if key.is_ok() and item.is_ok(): out.append((key.value, item.value))
        return Err(errors) if errors else Ok(out)

    def default_value(self) -> Any: return []


def _identity(value: Any) -> str:
    try:
        return canonical_text(value)
    except MalformedInput:
        return repr(value)


@dataclass(frozen=True, slots=True)
class SetSchema(Schema):
    """Array of unique elements (canonical JSON equality); output is a list."""
    element: Schema
    checks: tuple[Check, ...] = ()
    enforce_unique: bool = False

    def min_size(self, n: int, message: str | None = None) -> SetSchema:
        return replace(self, checks=(*self.checks, Check("min_size", n, message)))

    def max_size(self, n: int, message: str | None = None) -> SetSchema:
        return replace(self, checks=(*self.checks, Check("max_size", n, message)))

    def unique_items(self) -> SetSchema: return replace(self, enforce_unique=True)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, list): return type_mismatch("array", value)
        errors = ValidationError()
        validated = []
        for i, item in enumerate(value):
            result = self.element.run(item, ctx)
            if result.is_ok(): validated.append((i, item, result.value))
            else: errors.extend(result.error.with_prefix(Index(i)))
        if errors: return Err(errors)

        seen: set[str] = set()
        out = []
        for i, raw, item in validated:
            if (key := _identity(item)) in seen:
                if self.enforce_unique: errors.push(Custom("not_unique"), "Duplicate element", raw, (Index(i),))
                continue
            seen.add(key)
            out.append(item)
        errors.extend(run_checks(len(out), self.checks, SET_RULES, None, value))
        return Err(errors) if errors else Ok(out)

    def default_value(self) -> Any: return []


# ============================================================================
# Constructors
# ============================================================================

def array(element: Schema) -> ArraySchema: return ArraySchema(element)


def tuple_(*items: Schema) -> TupleSchema: return TupleSchema(tuple(items))


def record(value_schema: Schema) -> RecordSchema: return RecordSchema(value_schema)


def map_(key_schema: Schema, value_schema: Schema) -> MapSchema: return MapSchema(key_schema, value_schema)


def set_(element: Schema) -> SetSchema: return SetSchema(element)
