"""Schema Node Core

Schemas are immutable trees of frozen dataclass nodes. Every builder
method returns a new node (via ``dataclasses.replace``), so a schema can
be declared once and reused from any number of threads.

Execution contract:
- A type mismatch yields exactly one issue and stops the node.
- Declared checks all run, in order, and every failure accumulates.
- Child issues are prefixed with the child's path segment by the parent.
- Exceptions raised by user callables propagate untouched.

Key Features:
- Data-driven checks (``Check`` records evaluated against ``Rule`` tables)
- Per-node message overrides (explicit message > ``with_messages`` > default)
- Modifiers: optional, nullable, nullish, default, catch
- Combinators: refine, super_refine, transform, pipe, describe, message
- Operators: ``a | b`` (union), ``a & b`` (intersection)

Usage:
    from vetted import string, number, object_

    user = object_({
        "name": string().min(2).max(50),
        "age": number().int().non_negative().optional(),
    })
    user.parse({"name": "Ada"})   # {"name": "Ada", "age": None}
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Sequence

from vetted.config import get_settings
from vetted.errors import Err, MalformedInput, Ok, Result
from vetted.logging import validation_logger
from .errors import Custom, Field, Index, InvalidType, IssueCode, MissingField, PathSegment, ValidationError
from .values import MISSING, project, to_value, value_type_name

if TYPE_CHECKING:
    from pathlib import Path
    from .combinators import IntersectionSchema, UnionSchema

log = validation_logger()

ParseOutcome = Result[Any, ValidationError]
MessageFn = Callable[[str], "str | None"]


# ============================================================================
# Execution context
# ============================================================================

class ParseContext:
    """Per-call execution state: lazy resolution depth and its limit."""

    __slots__ = ("max_depth", "depth")

    def __init__(self, max_depth: int | None = None):
        self.max_depth = max_depth if max_depth is not None else get_settings().MAX_LAZY_DEPTH
        self.depth = 0


# ============================================================================
# Checks
# ============================================================================

@dataclass(frozen=True, slots=True)
class Rule:
    """How a check kind is evaluated, coded and worded.

    ``key`` is the message-override key passed to ``with_messages``.
    """
    key: str
    passes: Callable[[Any, Any], bool]
    code: Callable[[Any], IssueCode]
    message: Callable[[Any], str]


@dataclass(frozen=True, slots=True)
class Check:
    """A declared check: rule kind, argument and optional explicit message."""
    kind: str
    arg: Any = None
    message: str | None = None


def run_checks(
    subject: Any,
    checks: Sequence[Check],
    rules: dict[str, Rule],
    messages: MessageFn | None,
    received: Any,
) -> ValidationError:
    """Evaluate every check against ``subject``; collect all failures."""
    errors = ValidationError()
    for check in checks:
        rule = rules[check.kind]
        if rule.passes(subject, check.arg): continue
        message = check.message or (messages and messages(rule.key)) or rule.message(check.arg)
        errors.push(rule.code(check.arg), message, received)
    return errors


def type_mismatch(expected: str, value: Any, message: str | None = None) -> Err[ValidationError]:
    """Single-shot type issue; an absent key reports ``missing_field`` instead."""
    if value is MISSING:
        return Err(ValidationError.single(MissingField(), "Required field is missing"))
    received = value_type_name(value)
    return Err(ValidationError.single(InvalidType(expected, received),
        message or f"Expected {expected}, received {received}", value))


# ============================================================================
# Base node
# ============================================================================

class Schema(ABC):
    """Base schema node.

    Subclasses implement ``_parse(value, ctx)`` returning ``Ok``/``Err``
    and ``default_value()`` for the lenient engine.
    """

    __slots__ = ()

    @abstractmethod
    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        """Validate ``value`` (already in the value model)."""

    def run(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        """Entry point used by parent nodes."""
        return self._parse(value, ctx)

    def default_value(self) -> Any:
        """Type-appropriate fallback used by the lenient engine."""
        return None

    @property
    def description(self) -> str | None:
        return None

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_result(self, value: Any, *, max_depth: int | None = None) -> ParseOutcome:
        """Validate a value, returning ``Ok(output)`` or ``Err(ValidationError)``.

        The value is projected onto the value model first (tuples and sets
        become lists, dates become ISO strings); an unprojectable value
        raises MalformedInput.
        """
        if value is not MISSING: value = project(value)
        result = self.run(value, ParseContext(max_depth))
        if result.is_err():
            log.debug("parse_failed", schema=type(self).__name__, issue_count=len(result.error))
        return result

    def parse(self, value: Any, *, max_depth: int | None = None) -> Any:
        """Validate a value and return the output. Raises ValidationError or MalformedInput."""
        return self.parse_result(value, max_depth=max_depth).unwrap()

    def parse_json(self, text: str | bytes) -> Any:
        """Parse JSON text, then validate. Raises MalformedInput or ValidationError."""
        return self.parse(to_value(text, fmt="json"))

    def parse_yaml(self, text: str | bytes) -> Any:
        """Parse YAML text, then validate. Raises MalformedInput or ValidationError."""
        return self.parse(to_value(text, fmt="yaml"))

    def parse_file(self, path: str | Path) -> Any:
        """Read a JSON/YAML file, then validate. Raises MalformedInput or ValidationError."""
        from pathlib import Path as _Path
        return self.parse(to_value(_Path(path)))

    def validate(self, value: Any) -> Result[None, ValidationError]:
        """Check an existing typed value after projecting it back to the value model."""
        return self.parse_result(value).map(lambda _: None)

    def is_valid(self, value: Any) -> bool:
        return self.parse_result(value).is_ok()

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def optional(self) -> OptionalSchema: return OptionalSchema(self)

    def nullable(self) -> NullableSchema: return NullableSchema(self)

    def nullish(self) -> NullishSchema: return NullishSchema(self)

    def default(self, value: Any) -> DefaultSchema: return DefaultSchema(self, value)

    def default_factory(self, factory: Callable[[], Any]) -> DefaultSchema:
        return DefaultSchema(self, None, factory)

    def catch(self, fallback: Any) -> CatchSchema: return CatchSchema(self, fallback)

    def catch_with(self, handler: Callable[[ValidationError], Any]) -> CatchSchema:
        return CatchSchema(self, None, handler)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def refine(self, check: Callable[[Any], bool], message: str = "Invalid value", *,
               path: Sequence[str | int] = ()) -> RefineSchema:
        segments = tuple(Index(p) if isinstance(p, int) else Field(p) for p in path)
        return RefineSchema(self, check, message, segments)

    def super_refine(self, check: Callable[[Any, ValidationError], None]) -> SuperRefineSchema:
        return SuperRefineSchema(self, check)

    def transform(self, fn: Callable[[Any], Any]) -> TransformSchema: return TransformSchema(self, fn)

    def pipe(self, other: Schema) -> PipeSchema: return PipeSchema(self, other)

    def describe(self, text: str) -> DescribeSchema: return DescribeSchema(self, text)

    def message(self, text: str) -> MessageSchema: return MessageSchema(self, text)

    def or_(self, other: Schema) -> UnionSchema:
        from .combinators import union
        return union(self, other)

    def and_(self, other: Schema) -> IntersectionSchema:
        from .combinators import intersection
        return intersection(self, other)

    def __or__(self, other: Schema) -> UnionSchema: return self.or_(other)

    def __and__(self, other: Schema) -> IntersectionSchema: return self.and_(other)


@dataclass(frozen=True, slots=True)
class Wrapper(Schema):
    """Node that owns exactly one inner schema."""
    inner: Schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        return self.inner.run(value, ctx)

    def default_value(self) -> Any:
        return self.inner.default_value()

    @property
    def description(self) -> str | None:
        return self.inner.description


# ============================================================================
# Modifiers
# ============================================================================

@dataclass(frozen=True, slots=True)
class OptionalSchema(Wrapper):
    """Absent or null is "no value, no issue"."""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if value is MISSING or value is None: return Ok(None)
        return self.inner.run(value, ctx)

    def default_value(self) -> Any: return None


@dataclass(frozen=True, slots=True)
class NullableSchema(Wrapper):
    """Null is accepted; an absent key still goes through the inner schema."""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if value is None: return Ok(None)
        return self.inner.run(value, ctx)

    def default_value(self) -> Any: return None


@dataclass(frozen=True, slots=True)
class NullishSchema(Wrapper):
    """Absent and null are both accepted as no value."""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if value is MISSING or value is None: return Ok(None)
        return self.inner.run(value, ctx)

    def default_value(self) -> Any: return None


@dataclass(frozen=True, slots=True)
class DefaultSchema(Wrapper):
    """Absent or null input is replaced by the default, which is not re-validated."""
    value: Any = None
    factory: Callable[[], Any] | None = None

    def _produce(self) -> Any:
        return self.factory() if self.factory is not None else copy.deepcopy(self.value)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if value is MISSING or value is None: return Ok(self._produce())
        return self.inner.run(value, ctx)

    def default_value(self) -> Any: return self._produce()


@dataclass(frozen=True, slots=True)
class CatchSchema(Wrapper):
    """Any validation failure is discarded and the fallback substituted."""
    fallback: Any = None
    handler: Callable[[ValidationError], Any] | None = None

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if (result := self.inner.run(value, ctx)).is_ok(): return result
        if self.handler is not None: return Ok(self.handler(result.error))
        return Ok(copy.deepcopy(self.fallback))

    def default_value(self) -> Any:
        return copy.deepcopy(self.fallback) if self.handler is None else self.inner.default_value()


@dataclass(frozen=True, slots=True)
class RequiredSchema(Wrapper):
    """Absent or null input is a ``missing_field`` issue."""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if value is MISSING or value is None:
            return Err(ValidationError.single(MissingField(), "Required field is missing or null"))
        return self.inner.run(value, ctx)


def unwrap_optional(schema: Schema) -> Schema:
    """Strip optional/nullable/nullish/default wrappers."""
    while isinstance(schema, (OptionalSchema, NullableSchema, NullishSchema, DefaultSchema)):
        schema = schema.inner
    return schema


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class RefineSchema(Wrapper):
    """Boolean predicate on the inner output; one issue on failure."""
    check: Callable[[Any], bool] = bool
    text: str = "Invalid value"
    path: tuple[PathSegment, ...] = ()

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if (result := self.inner.run(value, ctx)).is_err(): return result
        if self.check(result.value): return result
        errors = ValidationError.single(Custom("custom"), self.text)
        return Err(errors.with_prefix(*self.path) if self.path else errors)


@dataclass(frozen=True, slots=True)
class SuperRefineSchema(Wrapper):
    """Predicate receives an issue accumulator and may push any number of issues."""
    check: Callable[[Any, ValidationError], None] = lambda value, errors: None

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if (result := self.inner.run(value, ctx)).is_err(): return result
        errors = ValidationError()
        self.check(result.value, errors)
        return Err(errors) if errors else result


@dataclass(frozen=True, slots=True)
class TransformSchema(Wrapper):
    """Pure function applied to a successful output."""
    fn: Callable[[Any], Any] = lambda value: value

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        return self.inner.run(value, ctx).map(self.fn)

    def default_value(self) -> Any: return None


@dataclass(frozen=True, slots=True)
class PipeSchema(Wrapper):
    """Left output, projected back to the value model, feeds the right schema."""
    then: Schema | None = None

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        if (result := self.inner.run(value, ctx)).is_err(): return result
        try:
            intermediate = project(result.value)
        except MalformedInput as e:
            return Err(ValidationError.single(Custom("pipe_serialize"),
                f"Failed to serialize intermediate value in pipe: {e.error.message}"))
        return self.then.run(intermediate, ctx)

    def default_value(self) -> Any:
        return self.then.default_value()


@dataclass(frozen=True, slots=True)
class DescribeSchema(Wrapper):
    """Attaches a description; validation is unchanged."""
    text: str = ""

    @property
    def description(self) -> str | None:
        return self.text


@dataclass(frozen=True, slots=True)
class MessageSchema(Wrapper):
    """Replaces the message of every issue produced by the inner schema."""
    text: str = ""

    def _parse(self, value: Any, ctx: ParseContext) -> ParseOutcome:
        return self.inner.run(value, ctx).map_err(lambda e: e.with_message(self.text))


def optional(schema: Schema) -> OptionalSchema:
    return OptionalSchema(schema)
