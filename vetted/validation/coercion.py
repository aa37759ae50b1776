"""Explicit Opt-in Coercion

Coercion is never implicit: a node only consults these rules after
``.coerce()`` was called on it. Rules run before the type check; a
failed coercion is reported through the node's ordinary single type
issue, never as a separate error class.

Coercion table:
- number  <- numeric string, bool (1/0)
- string  <- number, bool ("true"/"false")
- boolean <- "true"/"1", "false"/"0", number (n != 0)
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal

from vetted.errors import AppError, Err, ErrorCode, Ok, Result
from .values import _format_number, is_number

Target = Literal["number", "string", "boolean"]

_TARGET_CHECKS = {
    "number": is_number,
    "string": lambda v: isinstance(v, str),
    "boolean": lambda v: isinstance(v, bool),
}


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC):
    """Base class for coercion rules.

    Each rule defines:
    - Source type(s) it can coerce from
    - Target value-model type it coerces to
    - The actual coercion logic
    """

    @property
    @abstractmethod
    def target(self) -> Target:
        """Value-model type this rule coerces to."""

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        """Whether this rule applies to the value's type."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[Any, AppError]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Result[Any, AppError]:
        return self.coerce(value)


def _failed(value: str, target: Target) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E2002_INVALID_FORMAT,
        message=f'Cannot coerce "{value}" to {target}',
        metadata={"value": value, "target": target},
    ))


@dataclass(frozen=True, slots=True)
class StringToNumber(CoercionRule):
    """Parse a numeric string; integers stay int."""

    @property
    def target(self) -> Target:
        return "number"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def coerce(self, value: Any) -> Result[Any, AppError]:
        stripped = value.strip()
        if "_" in stripped: return _failed(value, "number")
        try:
            return Ok(int(stripped))
        except ValueError:
            pass
        try:
            number = float(stripped)
        except ValueError:
            return _failed(value, "number")
        return Ok(number) if not math.isnan(number) else _failed(value, "number")


@dataclass(frozen=True, slots=True)
class BoolToNumber(CoercionRule):

    @property
    def target(self) -> Target:
        return "number"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, bool)

    def coerce(self, value: Any) -> Result[Any, AppError]:
        return Ok(1 if value else 0)


@dataclass(frozen=True, slots=True)
class ScalarToString(CoercionRule):
    """Numbers render without a trailing ``.0``; bools as ``true``/``false``."""

    @property
    def target(self) -> Target:
        return "string"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, bool) or is_number(value)

    def coerce(self, value: Any) -> Result[Any, AppError]:
        if isinstance(value, bool): return Ok("true" if value else "false")
        return Ok(_format_number(value))


@dataclass(frozen=True, slots=True)
class StringToBoolean(CoercionRule):
    """Exact tokens only: "true"/"1" and "false"/"0"."""
    true_values: frozenset[str] = frozenset({"true", "1"})
    false_values: frozenset[str] = frozenset({"false", "0"})

    @property
    def target(self) -> Target:
        return "boolean"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def coerce(self, value: Any) -> Result[Any, AppError]:
        if value in self.true_values: return Ok(True)
        if value in self.false_values: return Ok(False)
        return _failed(value, "boolean")


@dataclass(frozen=True, slots=True)
class NumberToBoolean(CoercionRule):

    @property
    def target(self) -> Target:
        return "boolean"

    def accepts(self, value: Any) -> bool:
        return is_number(value)

    def coerce(self, value: Any) -> Result[Any, AppError]:
        return Ok(value != 0)


@dataclass(frozen=True, slots=True)
class ExplicitCoercion:
    """Ordered coercion rule set.

    Usage:
        coercer = ExplicitCoercion()
        coercer.coerce("42", "number")     # Ok(42)
        coercer.coerce("abc", "number")    # Err(AppError E2002)
        coercer.coerce([1], "number")      # Err(AppError E2004), no rule applies
    """
    rules: tuple[CoercionRule, ...] = field(default_factory=lambda: (
        StringToNumber(),
        BoolToNumber(),
        ScalarToString(),
        StringToBoolean(),
        NumberToBoolean(),
    ))

    def add_rule(self, rule: CoercionRule) -> ExplicitCoercion:
        """Add a coercion rule, returning new instance."""
        return ExplicitCoercion(rules=(*self.rules, rule))

    def coerce(self, value: Any, target: Target) -> Result[Any, AppError]:
        """Attempt to coerce value to the target value-model type."""
        if _TARGET_CHECKS[target](value):
            return Ok(value)

        for rule in self.rules:
            if rule.target == target and rule.accepts(value):
                return rule.coerce(value)

        return Err(AppError(
            code=ErrorCode.E2004_INVALID_TYPE,
            message=f"No coercion from {type(value).__name__} to {target}",
            metadata={"source_type": type(value).__name__, "target": target},
        ))


DEFAULT_COERCER = ExplicitCoercion()


def coerce(value: Any, target: Target) -> Result[Any, AppError]:
    """Convenience function using default coercer."""
    return DEFAULT_COERCER.coerce(value, target)
