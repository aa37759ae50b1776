"""Value Model and Input Boundary

Every schema reads and produces plain JSON-like Python values:
None, bool, int, float, str, list and dict (string keys, insertion
ordered). ``MISSING`` stands for an absent object key and is distinct
from None (null).

The boundary converts raw input into that model:
- ``pathlib.Path``: file read to completion, YAML by suffix, JSON otherwise
- ``bytes``: JSON text (or the requested format)
- ``str`` with an explicit ``fmt``: JSON or YAML text
- anything else: projected onto the model (pydantic models, dataclasses,
  enums, dates, tuples and sets are converted)

Any failure raises ``MalformedInput``; no partial value exists to validate.
"""
from __future__ import annotations

import dataclasses
import json
import math
import os
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Literal
from uuid import UUID

import yaml
from pydantic import BaseModel

from vetted.errors import invalid_json, invalid_value, invalid_yaml, file_read_error, raise_malformed
from vetted.logging import input_logger

log = input_logger()

InputFormat = Literal["json", "yaml"]


class _Missing:
    """Sentinel for an absent object key."""

    __slots__ = ()
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Any = _Missing()


def is_number(value: Any) -> bool:
    """True for int/float values; bool is never a number."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_type_name(value: Any) -> str:
    """Type tag of a value as reported in issues."""
    if value is MISSING: return "undefined"
    if value is None: return "null"
    if isinstance(value, bool): return "boolean"
    if is_number(value): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, (list, tuple)): return "array"
    if isinstance(value, Mapping): return "object"
    return type(value).__name__


def same_value(a: Any, b: Any) -> bool:
    """Value-model equality: booleans never equal numbers."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b): return a == b
    if type(a) is not type(b) and not (isinstance(a, Mapping) and isinstance(b, Mapping)): return False
    if isinstance(a, list):
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        return a.keys() == b.keys() and all(same_value(a[k], b[k]) for k in a)
    return a == b


def format_value_short(value: Any) -> str:
    """Compact single-line rendering used in human-readable messages."""
    if value is MISSING: return "undefined"
    if value is None: return "null"
    if isinstance(value, bool): return "true" if value else "false"
    if is_number(value): return _format_number(value)
    if isinstance(value, str):
        return f'"{value[:47]}..."' if len(value) > 50 else f'"{value}"'
    if isinstance(value, (list, tuple)): return f"Array(len={len(value)})"
    if isinstance(value, Mapping): return f"Object(keys={len(value)})"
    return repr(value)


def _format_number(n: int | float) -> str:
    if isinstance(n, float) and n.is_integer() and math.isfinite(n):
        return str(int(n))
    return str(n)


def truncate_value(value: Any, max_string: int = 100, max_items: int = 5) -> Any:
    """Shorten long strings and arrays before storing them on an issue."""
    if isinstance(value, str) and len(value) > max_string:
        return value[:max_string - 3] + "..."
    if isinstance(value, (list, tuple)) and len(value) > max_items:
        return [*value[:max_items], f"... ({len(value) - max_items} more)"]
    return value


def canonical_text(value: Any) -> str:
    """Deterministic JSON text of a value (used for set equality and idempotence)."""
    return json.dumps(to_value(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


# ============================================================================
# Projection
# ============================================================================

def _shallow(value: Any) -> tuple[Any, list[tuple[Any, Any]]]:
    """Convert one node; containers come back empty with their (slot, child) pairs."""
    if value is None or isinstance(value, (bool, str)): return value, []
    if isinstance(value, int): return int(value), []
    if isinstance(value, float): return value, []
    if isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
        return [None] * len(items), list(enumerate(items))
    if isinstance(value, Mapping):
        for k in value:
            if not isinstance(k, str):
                raise_malformed(invalid_value(f"object key of type {type(k).__name__}", origin="project"))
        return dict.fromkeys(value), list(value.items())
    if isinstance(value, Enum): return _shallow(value.value)
    if isinstance(value, BaseModel): return _shallow(value.model_dump(mode="json"))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _shallow(dataclasses.asdict(value))
    if isinstance(value, (datetime, date, time)): return value.isoformat(), []
    if isinstance(value, UUID): return str(value), []
    if isinstance(value, Decimal): return float(value), []
    raise_malformed(invalid_value(type(value).__name__, origin="project"))


def project(value: Any) -> Any:
    """Project a Python object onto the value model, raising MalformedInput.

    Walks with an explicit stack, so nesting depth is bounded only by memory.
    """
    root: list[Any] = [None]
    pending: list[tuple[Any, Any, Any]] = [(value, root, 0)]
    while pending:
        item, target, slot = pending.pop()
        node, children = _shallow(item)
        target[slot] = node
        pending.extend((child, node, key) for key, child in children)
    return root[0]


# ============================================================================
# Text / file decoding
# ============================================================================

def _decode_text(text: str | bytes, fmt: InputFormat) -> Any:
    if fmt == "yaml":
        try:
            loaded = yaml.safe_load(text)
        except (yaml.YAMLError, RecursionError) as e:
            log.warning("malformed_input", format="yaml", error=str(e))
            raise_malformed(invalid_yaml(str(e), origin="decode"))
        return project(loaded)
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        log.warning("malformed_input", format="json", error=str(e))
        raise_malformed(invalid_json(str(e), origin="decode"))


def read_file(path: str | os.PathLike) -> Any:
    """Read a JSON or YAML file (by suffix) into a value."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("malformed_input", path=str(p), error=str(e))
        raise_malformed(file_read_error(str(p), e, origin="read_file"))
    return _decode_text(text, "yaml" if p.suffix.lower() in (".yaml", ".yml") else "json")


def to_value(source: Any, *, fmt: InputFormat | None = None) -> Any:
    """Convert raw input into the value model.

    Args:
        source: A path, bytes, text (with ``fmt``) or an already-parsed value
        fmt: Treat ``str``/``bytes`` input as text in this format

    Raises:
        MalformedInput: the input cannot be read, parsed or projected
    """
    if isinstance(source, os.PathLike): return read_file(source)
    if isinstance(source, (bytes, bytearray)): return _decode_text(bytes(source), fmt or "json")
    if fmt is not None and isinstance(source, str): return _decode_text(source, fmt)
    return project(source)
