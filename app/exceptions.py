"""Backend exception taxonomy.

Services raise these; the handler registered in ``app.main`` turns them into
``{"error": ...}`` JSON responses with the matching status code.
"""

from typing import Optional


class SipSnapError(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


class Unauthenticated(SipSnapError):
    """No session cookie, or the session it names is unknown or expired."""

    status_code = 401

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message)


class Forbidden(SipSnapError):
    """A guest tried to change server-side favorites."""

    status_code = 403


class ValidationError(SipSnapError):
    """A required field is missing or blank."""

    status_code = 400


class UpstreamError(SipSnapError):
    """An external provider answered with a non-success status.

    The provider's status code and body are passed through to the caller.
    """

    def __init__(self, message: str, status_code: int, details: str = ""):
        super().__init__(message, status_code=status_code)
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class ServerMisconfigured(SipSnapError):
    """A credential the server needs is not configured."""

    status_code = 500


class StorageError(SipSnapError):
    """A database operation failed."""

    status_code = 500
