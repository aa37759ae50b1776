"""Validation at System Boundaries

Parse-don't-validate entry points. Raw input (a path, bytes, text with a
format, or an already-parsed value) is converted into the value model
once, then handed to the schema.

Two failure channels never mix:
- MalformedInput is raised when the input cannot become a value at all
- ValidationError issues come back inside ``Err``

Usage:
    match parse(user, Path("user.json")):
        case Ok(value):
            save(value)
        case Err(errors):
            print(prettify_error(errors))
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from vetted.errors import AppError, Err, MalformedInput, Result
from .errors import ValidationError
from .lenient import ParseResult, parse_lenient as _parse_lenient
from .objects import ObjectSchema
from .schema import Schema
from .values import InputFormat, to_value


# ============================================================================
# Functional boundary
# ============================================================================

def parse(schema: Schema, source: Any, *, fmt: InputFormat | None = None,
          max_depth: int | None = None) -> Result[Any, ValidationError]:
    """Convert ``source`` into a value and validate it. Raises MalformedInput."""
    return schema.parse_result(to_value(source, fmt=fmt), max_depth=max_depth)


def parse_lenient(schema: ObjectSchema, source: Any, *, fmt: InputFormat | None = None,
                  max_depth: int | None = None) -> ParseResult:
    """Per-field validation with defaults for failing fields. Raises MalformedInput."""
    return _parse_lenient(schema, source, fmt=fmt, max_depth=max_depth)


def validate(schema: Schema, value: Any) -> Result[None, ValidationError]:
    """Check an already-typed value (projected back onto the value model)."""
    return schema.validate(value)


def is_valid(schema: Schema, value: Any) -> bool:
    return schema.is_valid(value)


# ============================================================================
# Bound validator
# ============================================================================

class BoundaryValidator:
    """Stateless boundary validator for one schema.

    Usage:
        user_validator = BoundaryValidator(user, origin="signup")
        result = user_validator.parse_ingress(request_body)   # Result[Any, AppError]
    """

    __slots__ = ("schema", "origin")

    def __init__(self, schema: Schema, origin: str = "ingress"):
        self.schema, self.origin = schema, origin

    def parse(self, source: Any) -> Result[Any, ValidationError]:
        return parse(self.schema, source)

    def parse_ingress(self, source: Any) -> Result[Any, AppError]:
        """Validate incoming data, reporting failures in the AppError taxonomy.

        MalformedInput is folded into ``Err`` here as well.
        """
        try:
            result = parse(self.schema, source)
        except MalformedInput as e:
            return Err(e.error.with_metadata(boundary=self.origin))
        return result.map_err(lambda errors: errors.to_app_error().with_metadata(boundary=self.origin))


def validate_output(schema: Schema) -> Callable[[Callable], Callable]:
    """Decorator validating a function's return value. Raises ValidationError.

    Usage:
        @validate_output(user)
        def load_user(user_id: str) -> dict:
            return client.get(f"/users/{user_id}").json()
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            return schema.parse(to_value(func(*args, **kwargs)))
        return wrapper
    return decorator
