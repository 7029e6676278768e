from __future__ import annotations
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from .models import ApiError


class ApiRequestError(Exception):
    """Generic error raised by the client (not a raw transport failure)."""

class ApiAuthError(ApiRequestError):
    """Missing or blank access token."""

class DecodeError(ApiRequestError):
    """Payload could not be decoded into the expected model."""

class ApiHttpException(ApiRequestError):
    """HTTP failure whose body decoded into a structured ApiError."""

    def __init__(self, error: 'ApiError', cause: requests.HTTPError, status_code: int):
        super().__init__(error.message or f"HTTP {status_code}")
        self.error = error
        self.cause = cause
        self.status_code = status_code

    def __str__(self) -> str:
        return f"HTTP {self.status_code} error_code={self.error.code} type={self.error.type}: {self.error.message}"
