"""Exception hierarchy for the Bynder client.

Validation and credential errors are raised before any network activity.
HTTP failures carry the remote status and body unmodified; transport failures
surface as the original ``httpx`` exceptions.
"""

from __future__ import annotations

from typing import Any


class BynderError(Exception):
    """Base exception for all Bynder client errors."""


class ConfigurationError(BynderError, ValueError):
    """Raised at construction time for an unusable configuration."""


class TokenFormatError(ConfigurationError):
    """Raised when an initial token payload lacks a string ``access_token``."""


class MissingCredentialError(BynderError):
    """Raised by ``send`` when neither a permanent nor an expiring token is set."""

    def __init__(self, message: str = "No token found") -> None:
        super().__init__(message)
        self.message = message


class BynderValidationError(BynderError):
    """A required identifying parameter is missing; no request was made."""

    status = 0

    def __init__(self, module: str, fields: tuple[str, ...]) -> None:
        self.module = module
        self.fields = fields
        self.message = (
            f"The {module} {' or '.join(_join_fields(fields))} "
            "is not valid or it was not specified properly"
        )
        super().__init__(self.message)


class BynderAPIError(BynderError):
    """The service answered with an HTTP status of 400 or above."""

    def __init__(self, status: int, message: str, body: Any = None) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message, "body": self.body}


def _join_fields(fields: tuple[str, ...]) -> list[str]:
    # "username, password or consumerId"
    if len(fields) <= 2:
        return list(fields)
    return [", ".join(fields[:-1]), fields[-1]]
