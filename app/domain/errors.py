"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""

    code = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class NotFoundError(DomainError):
    """Resource not found."""

    code = "not_found"


class ValidationError(DomainError):
    """Invalid input or state."""

    code = "invalid_request"


class ConflictError(DomainError):
    """Resource conflict (e.g., duplicate id within a graph)."""

    code = "conflict"


class StorageError(DomainError):
    """The store could not complete the operation."""

    code = "storage_error"


class WatermarkUpdateError(StorageError):
    """Entity insert succeeded but the graph watermark could not be advanced."""

    code = "watermark_update_failed"
