"""
Exception hierarchy for sysnav.

Fetch failures are reported through Err results and degrade to empty data.
The classes here are raised for failures that must abort an action:
mutations, configuration problems and invalid input.
"""

from typing import Optional


class SysnavError(Exception):
    """Base class for all sysnav errors."""


class ConfigError(SysnavError):
    """Raised when configuration is missing or malformed."""


class ValidationError(SysnavError):
    """Raised when user input for a mutation is invalid."""


class StoreError(SysnavError):
    """
    Raised (or carried in an Err) when the entity store rejects a request.

    Attributes:
        status_code: HTTP status code, None for network-level failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RowNotFoundError(StoreError):
    """Raised when a single-row fetch finds nothing."""

    def __init__(self, table: str, row_id: str):
        self.table = table
        self.row_id = row_id
        super().__init__(f"No row in '{table}' with id '{row_id}'", status_code=406)


class MutationError(SysnavError):
    """
    Raised when an audited mutation (RPC) fails.

    Nothing is changed locally when this is raised; the caller keeps its
    previous state.
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
