"""Monadic Error Handling System

Result types and the application error taxonomy shared by the engine.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Boundary error type with code, message and metadata
- ErrorCode: Hierarchical error code taxonomy
- MalformedInput: Raised when raw input cannot become a value
- Builder functions: Ergonomic error construction

Usage:
    from vetted.errors import Ok, Err

    match schema.parse_result(data):
        case Ok(value):
            print(value)
        case Err(error):
            log.info("invalid", issues=len(error.issues))
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    AppErrorException,
    MalformedInput,
    # Constructors
    ok,
    err,
    # Combinators
    collect_results,
)

from .builders import (
    validation_error,
    invalid_json,
    invalid_yaml,
    invalid_value,
    file_read_error,
    file_write_error,
    raise_error,
    raise_malformed,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "AppErrorException",
    "MalformedInput",
    "ok",
    "err",
    "collect_results",
    "validation_error",
    "invalid_json",
    "invalid_yaml",
    "invalid_value",
    "file_read_error",
    "file_write_error",
    "raise_error",
    "raise_malformed",
]
