"""vetted: declarative runtime validation for JSON-like data.

Usage:
    import vetted as v

    user = v.object_({
        "name": v.string().min(2).max(50),
        "email": v.string().email(),
    })
    match v.parse(user, {"name": "A", "email": "bad"}):
        case v.Ok(value):
            ...
        case v.Err(errors):
            print(v.prettify_error(errors))
"""
__version__ = "0.1.0"

from vetted.config import Settings, get_settings
from vetted.errors import AppError, AppErrorException, Err, ErrorCode, MalformedInput, Ok, Result
from vetted.logging import configure_logging, get_logger
from vetted.validation import *  # noqa: F401,F403
from vetted.validation import __all__ as _validation_all

__all__ = [
    "__version__",
    "Settings", "get_settings",
    "AppError", "AppErrorException", "Err", "ErrorCode", "MalformedInput", "Ok", "Result",
    "configure_logging", "get_logger",
    *_validation_all,
]
