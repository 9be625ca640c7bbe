"""Core types, results, errors and the system graph container."""

from .exceptions import (
    ConfigError,
    MutationError,
    RowNotFoundError,
    StoreError,
    SysnavError,
    ValidationError,
)
from .graph import SystemGraph
from .result import Err, Ok, Result

__all__ = [
    "SysnavError",
    "ConfigError",
    "StoreError",
    "RowNotFoundError",
    "MutationError",
    "ValidationError",
    "SystemGraph",
    "Ok",
    "Err",
    "Result",
]
