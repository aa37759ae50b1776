"""Combinator Schemas

union / discriminated_union / intersection / lazy / custom / preprocess.

Usage:
    id_ = union(string().uuid(), number().int().positive())
    shape = discriminated_union("kind",
        object_({"kind": literal("circle"), "r": number()}),
        object_({"kind": literal("square"), "side": number()}),
    )
    tree = lazy(lambda: object_({"value": number(), "children": array(tree)}))
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable

from vetted.errors import AppError, Err, Ok
from vetted.logging import validation_logger
from .errors import Custom, Field, InvalidType, MissingField, RecursionLimitExceeded, ValidationError
from .objects import ObjectSchema
from .primitives import LiteralSchema
from .schema import ParseContext, ParseOutcome, Schema, Wrapper, type_mismatch
from .values import MISSING, format_value_short, same_value

log = validation_logger()

MIN_UNION_BRANCHES, MAX_UNION_BRANCHES = 2, 6


# ============================================================================
# Union
# ============================================================================

def _closeness(errors: ValidationError) -> int:
    """0 for a root type failure, otherwise 1 + deepest issue path."""
    if any(not i.path and isinstance(i.code, (InvalidType, MissingField)) for i in errors): return 0
    return 1 + max((len(i.path) for i in errors), default=0)


@dataclass(frozen=True, slots=True)
class UnionSchema(Schema):
    """First succeeding branch wins; total failure is a single ``invalid_union`` issue."""
    branches: tuple[Schema, ...]
    report_closest: bool = False

    def __post_init__(self):
        if not MIN_UNION_BRANCHES <= len(self.branches) <= MAX_UNION_BRANCHES:
            raise ValueError(f"union takes {MIN_UNION_BRANCHES} to {MAX_UNION_BRANCHES} schemas, "
                f"got {len(self.branches)}")

    def closest_match(self) -> UnionSchema:
        """Also report the issues of the branch that came closest to matching."""
        return replace(self, report_closest=True)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        failures: list[ValidationError] = []
        for branch in self.branches:
            if (result := branch.run(value, ctx)).is_ok(): return result
            failures.append(result.error)

        log.debug("union_no_match", branches=len(self.branches))
        errors = ValidationError.single(Custom("invalid_union"), "Input did not match any variant of the union", value)
        if self.report_closest:
            errors.extend(max(failures, key=_closeness))
        return Err(errors)

    def default_value(self) -> Any: return self.branches[0].default_value()


# ============================================================================
# Discriminated union
# ============================================================================

def _discriminator_value(branch: ObjectSchema, field: str) -> Any:
    if not isinstance(schema := branch.shape.get(field), LiteralSchema):
        raise ValueError(f"discriminated_union branch must declare {field!r} as a literal")
    return schema.expected


@dataclass(frozen=True, slots=True)
class DiscriminatedUnionSchema(Schema):
    """Dispatch on a literal discriminator field to exactly one object branch."""
    field: str
    branches: tuple[ObjectSchema, ...]

    def __post_init__(self):
        if not self.branches: raise ValueError("discriminated_union requires at least one branch")
        for branch in self.branches: _discriminator_value(branch, self.field)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if not isinstance(value, dict): return type_mismatch("object", value)
        if (tag := value.get(self.field, MISSING)) is MISSING:
            return Err(ValidationError.single(MissingField(), f'Missing discriminator field "{self.field}"')
                .with_prefix(Field(self.field)))
        for branch in self.branches:
            if same_value(tag, _discriminator_value(branch, self.field)): return branch.run(value, ctx)
        expected = ", ".join(format_value_short(_discriminator_value(b, self.field)) for b in self.branches)
        errors = ValidationError.single(Custom("invalid_discriminator"),
            f"Invalid discriminator value {format_value_short(tag)}. Expected one of: {expected}", tag)
        return Err(errors.with_prefix(Field(self.field)))

    def default_value(self) -> Any: return self.branches[0].default_value()


# ============================================================================
# Intersection
# ============================================================================

@dataclass(frozen=True, slots=True)
class IntersectionSchema(Schema):
    """Both sides run and must pass.

    Object outputs merge with the right side winning on key clashes; any
    other output comes from the right side. Issues merge by path with the
    left side winning where both report the same path.
    """
    left: Schema
    right: Schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        left, right = self.left.run(value, ctx), self.right.run(value, ctx)
        if left.is_ok() and right.is_ok():
            if isinstance(left.value, dict) and isinstance(right.value, dict):
                return Ok({**left.value, **right.value})
            return right
        errors = ValidationError()
        if left.is_err(): errors.extend(left.error)
        if right.is_err():
            taken = {i.path for i in errors}
            errors.extend(ValidationError([i for i in right.error if i.path not in taken]))
        return Err(errors)

    def default_value(self) -> Any:
        left, right = self.left.default_value(), self.right.default_value()
        return {**left, **right} if isinstance(left, dict) and isinstance(right, dict) else right


# ============================================================================
# Lazy
# ============================================================================

@dataclass(frozen=True, slots=True)
class LazySchema(Schema):
    """Deferred schema for recursive structures, bounded by the context depth limit."""
    factory: Callable[[], Schema]

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if ctx.depth >= ctx.max_depth:
            log.warning("recursion_limit_exceeded", max_depth=ctx.max_depth)
            return Err(ValidationError.single(RecursionLimitExceeded(ctx.max_depth),
                f"Maximum recursion depth of {ctx.max_depth} exceeded"))
        ctx.depth += 1
        try:
            return self.factory().run(value, ctx)
        finally:
            ctx.depth -= 1


# ============================================================================
# Custom / Preprocess
# ============================================================================

class CustomIssue(Exception):
    """Raised from a ``custom`` callable to reject the value."""

    def __init__(self, message: str | None = None):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class CustomSchema(Schema):
    """User callable returning the output, an ``Err``, or raising ``CustomIssue``.

    The text of a returned ``Err`` (a string or an AppError) becomes the
    issue message; ``text`` covers an empty one.
    """
    fn: Callable[[Any], Any]
    text: str = "Invalid value"

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        try:
            output = self.fn(value)
        except CustomIssue as e:
            return Err(ValidationError.single(Custom("custom"), e.message or self.text, value))
        if isinstance(output, Err):
            reason = output.error.message if isinstance(output.error, AppError) else output.error
            text = reason if isinstance(reason, str) and reason else self.text
            return Err(ValidationError.single(Custom("custom"), text, value))
        return output if isinstance(output, Ok) else Ok(output)


@dataclass(frozen=True, slots=True)
class PreprocessSchema(Wrapper):
    """Applies ``fn`` to the raw value before the inner schema runs."""
    fn: Callable[[Any], Any] = lambda value: value

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        return self.inner.run(self.fn(value), ctx)


# ============================================================================
# Constructors
# ============================================================================

def union(*branches: Schema) -> UnionSchema:
    return UnionSchema(tuple(branches))


def discriminated_union(field: str, *branches: ObjectSchema) -> DiscriminatedUnionSchema:
    return DiscriminatedUnionSchema(field, tuple(branches))


def intersection(left: Schema, right: Schema) -> IntersectionSchema:
    return IntersectionSchema(left, right)


def lazy(factory: Callable[[], Schema]) -> LazySchema:
    return LazySchema(factory)


def custom(fn: Callable[[Any], Any], message: str = "Invalid value") -> CustomSchema:
    return CustomSchema(fn, message)


def preprocess(fn: Callable[[Any], Any], schema: Schema) -> PreprocessSchema:
    return PreprocessSchema(schema, fn)
