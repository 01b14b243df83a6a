"""API response schemas.

This module defines the common API response formats used across the application.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel


# Type variable for generic response types
T = TypeVar("T")


class ApiResponse[T](BaseModel):
    """Standard API response wrapper used by service endpoints such as health.

    Attributes:
        success: Whether the request was successful.
        data: The actual response data (when success is True).
        message: A human-readable message about the response.
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"


class ErrorBody(BaseModel):
    """Error body returned by every failing endpoint.

    The presentation layer shows `error` verbatim, so it must always be a
    human-readable string. `details` is omitted from the JSON when empty.

    Attributes:
        error: A human-readable error message.
        details: Optional diagnostic payload (validation errors, provider text).
    """

    error: str
    details: Any | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
