"""Error Builders

Ergonomic constructors for the input-boundary errors. Each returns an
``Err[AppError]`` so callers can stay inside the Result monad or raise
via ``raise_error``.
"""
from __future__ import annotations

from .types import AppError, AppErrorException, Err, ErrorCode, MalformedInput


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    return Err(AppError(
        code=code,
        message=message,
        origin=origin,
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def invalid_json(message: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid JSON: {message}",
        code=ErrorCode.E2021_INVALID_JSON,
        origin=origin,
    )


def invalid_yaml(message: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid YAML: {message}",
        code=ErrorCode.E2022_INVALID_YAML,
        origin=origin,
    )


def invalid_value(type_name: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Cannot convert {type_name} to a JSON-like value",
        code=ErrorCode.E2004_INVALID_TYPE,
        origin=origin,
        type=type_name,
    )


# =============================================================================
# Resource Errors (E6xxx)
# =============================================================================

def file_read_error(path: str, error: Exception | str, origin: str = "") -> Err[AppError]:
    """E6001 for a missing file, E6002 for any other read failure."""
    code = ErrorCode.E6001_FILE_NOT_FOUND if isinstance(error, FileNotFoundError) else ErrorCode.E6002_FILE_READ_ERROR
    return Err(AppError(
        code=code,
        message=f"Failed to read file: {error}",
        origin=origin,
        metadata={"path": path},
    ))


def file_write_error(path: str, message: str, origin: str = "") -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E6003_FILE_WRITE_ERROR,
        message=f"Failed to write file: {message}",
        origin=origin,
        metadata={"path": path},
    ))


# =============================================================================
# Raising
# =============================================================================

def raise_error(error: AppError) -> None:
    """Raise AppError as exception."""
    raise AppErrorException(error)


def raise_malformed(result: Err[AppError]) -> None:
    """Raise the boundary error carried by ``result`` as MalformedInput."""
    raise MalformedInput(result.unwrap_err())
