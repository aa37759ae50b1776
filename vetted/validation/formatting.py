"""Error Shaping

Pure functions deriving alternative shapes from a ``ValidationError``;
nothing is re-validated.

- flatten_error: form-level messages plus messages per top-level field
- treeify_error: nested tree mirroring the schema shape
- prettify_error: human-readable multi-line text
- to_wire / to_wire_dict: the ``{error, issues: [{path, message, code}]}``
  envelope shared by HTTP adapters

Usage:
    try:
        user.parse(payload)
    except ValidationError as e:
        return JSONResponse(status_code=422, content=to_wire_dict(e))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .errors import Field, ValidationError
from .values import format_value_short

WIRE_ERROR = "Validation failed"


# ============================================================================
# Flat
# ============================================================================

@dataclass(slots=True)
class FlatError:
    """Messages without a path, and messages grouped by top-level field."""
    form_errors: list[str] = field(default_factory=list)
    field_errors: dict[str, list[str]] = field(default_factory=dict)


def flatten_error(error: ValidationError) -> FlatError:
    flat = FlatError()
    for issue in error:
        if not issue.path:
            flat.form_errors.append(issue.message)
            continue
        key = str(issue.path[0]).removeprefix(".")
        flat.field_errors.setdefault(key, []).append(issue.message)
    return flat


# ============================================================================
# Tree
# ============================================================================

@dataclass(slots=True)
class ErrorTree:
    """Errors at this node, plus child trees by property name and by index."""
    errors: list[str] = field(default_factory=list)
    properties: dict[str, ErrorTree] = field(default_factory=dict)
    items: list[ErrorTree | None] = field(default_factory=list)

    def child(self, segment: Any) -> ErrorTree:
        if isinstance(segment, Field):
            return self.properties.setdefault(segment.name, ErrorTree())
        while len(self.items) <= segment.index: self.items.append(None)
        if self.items[segment.index] is None: self.items[segment.index] = ErrorTree()
        return self.items[segment.index]


def treeify_error(error: ValidationError) -> ErrorTree:
    root = ErrorTree()
    for issue in error:
        node = root
        for segment in issue.path: node = node.child(segment)
        node.errors.append(issue.message)
    return root


# ============================================================================
# Pretty
# ============================================================================

def prettify_error(error: ValidationError) -> str:
    """Render issues as ``✖ message`` lines with an ``→ at path, received X`` detail line."""
    lines = []
    for issue in error:
        lines.append(f"✖ {issue.message}")
        parts = []
        if issue.path: parts.append(f"at {issue.path_str}")
        if issue.has_received: parts.append(f"received {format_value_short(issue.received)}")
        if parts: lines.append(f"  → {', '.join(parts)}")
    return "\n".join(lines)


# ============================================================================
# Wire envelope
# ============================================================================

class ValidationIssueBody(BaseModel):
    path: str
    message: str
    code: str


class ValidationErrorBody(BaseModel):
    error: str = WIRE_ERROR
    issues: list[ValidationIssueBody]


def to_wire(error: ValidationError) -> ValidationErrorBody:
    return ValidationErrorBody(issues=[
        ValidationIssueBody(path=i.path_str, message=i.message, code=i.code.key) for i in error
    ])


def to_wire_dict(error: ValidationError) -> dict[str, Any]:
    return to_wire(error).model_dump()
