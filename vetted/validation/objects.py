"""Object Schema

Declared fields validated in declaration order, every field's issues
accumulated under its ``Field(name)`` prefix. An absent key is
validated as ``MISSING`` so wrappers can tell "absent" from "null".

Unknown-key policies:
- strip (default): unknown keys are dropped
- strict: each unknown key is an ``unrecognized_field`` issue
- passthrough: unknown keys are copied unvalidated
- catchall(schema): unknown keys are validated and kept

Graph transforms (pick, omit, extend, merge, partial, required,
deep_partial) return new schemas; nothing is re-validated.

Usage:
    user = object_({"name": string().min(2), "email": string().email()}).strict()
    patch = user.partial()
    admin = user.extend({"role": literal("admin")})
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Mapping

from vetted.errors import Err, Ok
from .errors import Field, UnrecognizedField, ValidationError
from .primitives import EnumSchema
from .schema import OptionalSchema, ParseContext, ParseOutcome, RequiredSchema, Schema, type_mismatch, unwrap_optional
from .values import MISSING, same_value

UnknownKeys = Literal["strip", "strict", "passthrough"]


@dataclass(frozen=True, slots=True)
class Condition:
    """``when`` rule: if ``field`` output equals ``equals``, check ``target`` against ``schema``."""
    field: str
    equals: Any
    target: str
    schema: Schema


@dataclass(frozen=True, slots=True)
class ObjectSchema(Schema):
    fields: tuple[tuple[str, Schema], ...] = ()
    unknown_keys: UnknownKeys = "strip"
    catchall_schema: Schema | None = None
    conditions: tuple[Condition, ...] = ()

    @property
    def shape(self) -> dict[str, Schema]:
        return dict(self.fields)

    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    # ------------------------------------------------------------------
    # Unknown-key policy
    # ------------------------------------------------------------------

    def strip(self) -> ObjectSchema: return replace(self, unknown_keys="strip", catchall_schema=None)

    def strict(self) -> ObjectSchema: return replace(self, unknown_keys="strict", catchall_schema=None)

    def passthrough(self) -> ObjectSchema: return replace(self, unknown_keys="passthrough", catchall_schema=None)

    def catchall(self, schema: Schema) -> ObjectSchema: return replace(self, catchall_schema=schema)

    def when(self, field: str, equals: Any, target: str, schema: Schema) -> ObjectSchema:
        return replace(self, conditions=(*self.conditions, Condition(field, equals, target, schema)))

    # ------------------------------------------------------------------
    # Graph transforms
    # ------------------------------------------------------------------

    def _with_fields(self, fields: Mapping[str, Schema]) -> ObjectSchema:
        return replace(self, fields=tuple(fields.items()))

    def pick(self, *names: str) -> ObjectSchema:
        return self._with_fields({n: s for n, s in self.fields if n in names})

    def omit(self, *names: str) -> ObjectSchema:
        return self._with_fields({n: s for n, s in self.fields if n not in names})

    def extend(self, fields: Mapping[str, Schema]) -> ObjectSchema:
        return self._with_fields({**self.shape, **fields})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        return self._with_fields({**self.shape, **other.shape})

    def partial(self, *names: str) -> ObjectSchema:
        return self._with_fields({n: OptionalSchema(s) if not names or n in names else s for n, s in self.fields})

    def field_optional(self, name: str) -> ObjectSchema:
        if name not in self.shape: raise KeyError(name)
        return self.partial(name)

    def required(self, *names: str) -> ObjectSchema:
        return self._with_fields({
            n: RequiredSchema(unwrap_optional(s)) if not names or n in names else s for n, s in self.fields
        })

    def deep_partial(self) -> ObjectSchema:
        def deepen(schema: Schema) -> Schema:
            inner = unwrap_optional(schema)
            return OptionalSchema(inner.deep_partial() if isinstance(inner, ObjectSchema) else schema)
        return self._with_fields({n: deepen(s) for n, s in self.fields})

    def keyof(self) -> EnumSchema:
        if not self.fields: raise ValueError("keyof requires at least one field")
        return EnumSchema(tuple(self.field_names()))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, dict): return type_mismatch("object", value)
        errors, out = ValidationError(), {}
        for name, schema in self.fields:
            result = schema.run(value.get(name, MISSING), ctx)
            if result.is_ok(): out[name] = result.value
            else: errors.extend(result.error.with_prefix(Field(name)))

        declared = self.shape
        for key, item in value.items():
            if key in declared: continue
            if self.catchall_schema is not None:
                result = self.catchall_schema.run(item, ctx)
                if result.is_ok(): out[key] = result.value
                else: errors.extend(result.error.with_prefix(Field(key)))
            elif self.unknown_keys == "strict":
                errors.push(UnrecognizedField(key), f'Unrecognized field: "{key}"', path=(Field(key),))
            elif self.unknown_keys == "passthrough":
                out[key] = item

        for cond in self.conditions:
            if cond.field not in out or not same_value(out[cond.field], cond.equals): continue
            if (result := cond.schema.run(value.get(cond.target, MISSING), ctx)).is_err():
                errors.extend(result.error.with_prefix(Field(cond.target)))

        return Err(errors) if errors else Ok(out)

    def default_value(self) -> Any:
        return {name: schema.default_value() for name, schema in self.fields}


def object_(fields: Mapping[str, Schema] | None = None) -> ObjectSchema:
    return ObjectSchema(tuple((fields or {}).items()))
