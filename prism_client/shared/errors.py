"""Custom exceptions for the prism client."""

from __future__ import annotations

from typing import Any


class SchemaError(Exception):
    """Base exception for schema metadata errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a metadata record is malformed."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class PrismError(Exception):
    """Raised when a request against the prism API fails."""

    def __init__(
        self,
        message: str,
        code: str,
        status: int | None = None,
        details: Any = None,
    ) -> None:
        self.code = code
        self.status = status
        self.details = details
        super().__init__(message)
