"""Validation Issue Model

Structured issues with JSON-style paths, stable machine-readable codes
and truncated received values. Issues always accumulate; a
``ValidationError`` carries every issue collected during one pass.

Rendering:
    .user.addresses[0].street: String must be at least 3 characters, received "ab"
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Iterator, Sequence

from vetted.config import get_settings
from vetted.errors import AppError, ErrorCode
from .values import MISSING, _format_number, format_value_short, truncate_value


# ============================================================================
# Paths
# ============================================================================

@dataclass(frozen=True, slots=True)
class Field:
    """Object key path segment, rendered as ``.name``."""
    name: str

    def __str__(self) -> str: return f".{self.name}"


@dataclass(frozen=True, slots=True)
class Index:
    """Sequence position path segment, rendered as ``[i]``."""
    index: int

    def __str__(self) -> str: return f"[{self.index}]"


PathSegment = Field | Index
Path = tuple[PathSegment, ...]


def format_path(path: Sequence[PathSegment]) -> str:
    """Concatenate segments, e.g. ``.items[0].name``; empty for the root."""
    return "".join(str(s) for s in path)


# ============================================================================
# Issue codes
# ============================================================================

class IssueCode:
    """Base for issue code variants. ``key`` is stable and used for i18n."""
    __slots__ = ()
    KEY: ClassVar[str] = "custom"

    @property
    def key(self) -> str: return self.KEY

    def params(self) -> dict[str, str]:
        """Template parameters for message translation."""
        return {}


@dataclass(frozen=True, slots=True)
class InvalidType(IssueCode):
    expected: str
    received: str
    KEY: ClassVar[str] = "invalid_type"

    def params(self) -> dict[str, str]: return {"expected": self.expected, "received": self.received}


@dataclass(frozen=True, slots=True)
class TooSmall(IssueCode):
    minimum: float
    inclusive: bool = True
    KEY: ClassVar[str] = "too_small"

    def params(self) -> dict[str, str]:
        return {"minimum": _format_number(self.minimum), "inclusive": str(self.inclusive).lower()}


@dataclass(frozen=True, slots=True)
class TooBig(IssueCode):
    maximum: float
    inclusive: bool = True
    KEY: ClassVar[str] = "too_big"

    def params(self) -> dict[str, str]:
        return {"maximum": _format_number(self.maximum), "inclusive": str(self.inclusive).lower()}


@dataclass(frozen=True, slots=True)
class InvalidString(IssueCode):
    validation: str
    KEY: ClassVar[str] = "invalid_string"

    def params(self) -> dict[str, str]: return {"validation": self.validation}


@dataclass(frozen=True, slots=True)
class NotInt(IssueCode):
    KEY: ClassVar[str] = "not_int"


@dataclass(frozen=True, slots=True)
class NotFinite(IssueCode):
    KEY: ClassVar[str] = "not_finite"


@dataclass(frozen=True, slots=True)
class MissingField(IssueCode):
    KEY: ClassVar[str] = "missing_field"


@dataclass(frozen=True, slots=True)
class UnrecognizedField(IssueCode):
    field: str = ""
    KEY: ClassVar[str] = "unrecognized_field"

    def params(self) -> dict[str, str]: return {"field": self.field}


@dataclass(frozen=True, slots=True)
class RecursionLimitExceeded(IssueCode):
    max_depth: int
    KEY: ClassVar[str] = "recursion_limit_exceeded"

    def params(self) -> dict[str, str]: return {"max_depth": str(self.max_depth)}


@dataclass(frozen=True, slots=True)
class Custom(IssueCode):
    code: str = "custom"

    @property
    def key(self) -> str: return self.code

    def params(self) -> dict[str, str]: return {"code": self.code}


# ============================================================================
# Issues
# ============================================================================

@dataclass(frozen=True, slots=True)
class Issue:
    """A single constraint violation."""
    code: IssueCode
    message: str
    path: Path = ()
    received: Any = MISSING

    @property
    def path_str(self) -> str: return format_path(self.path)

    @property
    def has_received(self) -> bool: return self.received is not MISSING

    def with_prefix(self, *segments: PathSegment) -> Issue:
        return replace(self, path=(*segments, *self.path))

    def __str__(self) -> str:
        text = f"{p}: {self.message}" if (p := self.path_str) else self.message
        return f"{text}, received {format_value_short(self.received)}" if self.has_received else text


def make_issue(code: IssueCode, message: str, received: Any = MISSING, path: Path = ()) -> Issue:
    """Build an issue, truncating the received value per settings."""
    if received is not MISSING:
        settings = get_settings()
        received = truncate_value(received, settings.RECEIVED_MAX_STRING, settings.RECEIVED_MAX_ITEMS)
    return Issue(code=code, message=message, path=tuple(path), received=received)


@dataclass
class ValidationError(Exception):
    """Validation failure carrying every accumulated issue.

    Usage:
        errors = ValidationError()
        errors.push(TooSmall(3), "String must be at least 3 characters", value)
        errors.issue(Custom("weak_password")).message("Too weak").path_field("password").finish()
        if errors: raise errors
    """
    issues: list[Issue] = field(default_factory=list)

    def __post_init__(self):
        super().__init__(self.issues)

    @classmethod
    def single(cls, code: IssueCode, message: str, received: Any = MISSING) -> ValidationError:
        return cls([make_issue(code, message, received)])

    def push(self, code: IssueCode, message: str, received: Any = MISSING, path: Path = ()) -> None:
        self.issues.append(make_issue(code, message, received, path))

    def add_issue(self, message: str, *, code: IssueCode | str = "custom", path: Sequence[str | int] = (),
                  received: Any = MISSING) -> None:
        """Push an issue using plain path components (str for fields, int for indices)."""
        code = Custom(code) if isinstance(code, str) else code
        self.push(code, message, received, tuple(Index(p) if isinstance(p, int) else Field(p) for p in path))

    def issue(self, code: IssueCode | str) -> IssueBuilder:
        """Start a fluent issue builder that appends on ``finish()``."""
        return IssueBuilder(self, Custom(code) if isinstance(code, str) else code)

    def extend(self, other: ValidationError) -> ValidationError:
        self.issues.extend(other.issues)
        return self

    def with_prefix(self, *segments: PathSegment) -> ValidationError:
        return ValidationError([i.with_prefix(*segments) for i in self.issues])

    def with_message(self, message: str) -> ValidationError:
        return ValidationError([replace(i, message=message) for i in self.issues])

    def __bool__(self) -> bool: return bool(self.issues)

    def __len__(self) -> int: return len(self.issues)

    def __iter__(self) -> Iterator[Issue]: return iter(self.issues)

    def __str__(self) -> str: return "\n".join(str(i) for i in self.issues)

    @property
    def field_errors(self) -> dict[str, list[Issue]]:
        """Group issues by rendered path."""
        result: dict[str, list[Issue]] = {}
        for issue in self.issues: result.setdefault(issue.path_str, []).append(issue)
        return result

    def errors_at(self, *path: str | int) -> list[Issue]:
        target = tuple(Index(p) if isinstance(p, int) else Field(p) for p in path)
        return [i for i in self.issues if i.path == target]

    def to_app_error(self) -> AppError:
        """Convert to AppError for callers using the application error taxonomy."""
        if len(self.issues) == 1:
            i = self.issues[0]
            return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=str(i),
                metadata={"path": i.path_str, "code": i.code.key})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"Validation failed: {len(self.issues)} errors",
            metadata={"error_count": len(self.issues),
                "errors": [{"path": i.path_str, "code": i.code.key, "message": i.message} for i in self.issues]})


class IssueBuilder:
    """Fluent construction of a single issue.

    Usage:
        errors.issue(TooSmall(8)).message("Too short").path_field("password").received(pw).finish()
    """

    __slots__ = ("_target", "_code", "_message", "_path", "_received")

    def __init__(self, target: ValidationError, code: IssueCode):
        self._target, self._code = target, code
        self._message: str | None = None
        self._path: list[PathSegment] = []
        self._received: Any = MISSING

    def message(self, message: str) -> IssueBuilder:
        self._message = message
        return self

    def path_field(self, name: str) -> IssueBuilder:
        self._path.append(Field(name))
        return self

    def path_index(self, index: int) -> IssueBuilder:
        self._path.append(Index(index))
        return self

    def received(self, value: Any) -> IssueBuilder:
        self._received = value
        return self

    def finish(self) -> Issue:
        issue = make_issue(self._code, self._message or f"Validation error: {self._code.key}",
            self._received, tuple(self._path))
        self._target.issues.append(issue)
        return issue
