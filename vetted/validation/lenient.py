"""Lenient Per-Field Engine

Validates each declared field of an object schema independently. A
failing field never blocks its siblings: it is replaced by the field
schema's type-appropriate default, and its issues are kept on its
``FieldResult``. The aggregate value is always produced.

Usage:
    result = parse_lenient(user, {"name": "X", "email": "bad"})
    result.value                  # {"name": "", "email": "", "age": None}
    result.field("email").errors  # ValidationError with one issue
    print(result)
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from vetted.errors import file_write_error, raise_error
from vetted.logging import validation_logger
from .errors import ValidationError
from .objects import ObjectSchema
from .schema import ParseContext
from .values import MISSING, InputFormat, format_value_short, project, to_value

log = validation_logger()


@dataclass(frozen=True, slots=True)
class FieldResult:
    """Outcome of one declared field."""
    name: str
    input: Any
    output: Any = None
    errors: ValidationError | None = None

    def is_ok(self) -> bool: return self.errors is None

    def is_err(self) -> bool: return self.errors is not None

    def __str__(self) -> str:
        if self.errors is None: return f"✔ {self.name}: {format_value_short(self.output)}"
        received = format_value_short(self.input)
        return "\n".join(f"✖ {self.name}: {i.message} (received: {received})" for i in self.errors)


@dataclass(slots=True)
class ParseResult:
    """Best-effort aggregate value plus per-field diagnostics."""
    value: dict[str, Any]
    field_results: list[FieldResult] = field(default_factory=list)

    def fields(self) -> list[FieldResult]: return list(self.field_results)

    def field(self, name: str) -> FieldResult | None:
        return next((f for f in self.field_results if f.name == name), None)

    def valid_fields(self) -> list[FieldResult]: return [f for f in self.field_results if f.is_ok()]

    def error_fields(self) -> list[FieldResult]: return [f for f in self.field_results if f.is_err()]

    def is_valid(self) -> bool: return all(f.is_ok() for f in self.field_results)

    def has_errors(self) -> bool: return any(f.is_err() for f in self.field_results)

    def valid_count(self) -> int: return len(self.valid_fields())

    def error_count(self) -> int: return len(self.error_fields())

    def into_parts(self) -> tuple[dict[str, Any], list[FieldResult]]:
        return self.value, list(self.field_results)

    def to_json_string(self) -> str:
        return json.dumps(project(self.value), indent=2, ensure_ascii=False)

    def save_to_file(self, path: str | os.PathLike) -> None:
        """Write the aggregate value as pretty JSON. Raises AppErrorException (E6003)."""
        text = self.to_json_string()
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as e:
            raise_error(file_write_error(str(path), str(e), origin="save_to_file").unwrap_err())

    def __iter__(self) -> Iterator[FieldResult]: return iter(self.field_results)

    def __str__(self) -> str:
        lines = [f"ParseResult ({self.valid_count()} valid, {self.error_count()} errors):"]
        lines.extend(f"  {line}" for f in self.field_results for line in str(f).split("\n"))
        return "\n".join(lines)


def parse_lenient(schema: ObjectSchema, source: Any, *, fmt: InputFormat | None = None,
                  max_depth: int | None = None) -> ParseResult:
    """Validate every field of ``schema`` on its own. Raises MalformedInput only."""
    if not isinstance(schema, ObjectSchema):
        raise TypeError(f"parse_lenient requires an object schema, got {type(schema).__name__}")
    data = to_value(source, fmt=fmt)
    if not isinstance(data, dict):
        log.warning("lenient_non_object_input", received=type(data).__name__)
        data = {}

    ctx = ParseContext(max_depth)
    value, results = {}, []
    for name, field_schema in schema.fields:
        raw = data.get(name, MISSING)
        outcome = field_schema.run(raw, ctx)
        if outcome.is_ok():
            value[name] = outcome.value
            results.append(FieldResult(name, raw, outcome.value))
        else:
            value[name] = field_schema.default_value()
            results.append(FieldResult(name, raw, errors=outcome.error))

    result = ParseResult(value, results)
    log.debug("lenient_parse_complete", valid=result.valid_count(), errors=result.error_count())
    return result
