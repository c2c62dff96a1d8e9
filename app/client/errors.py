"""Errors raised by the client package."""


class ClientError(Exception):
    """Base class for failures shown to the user as an inline message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BackendError(ClientError):
    """The SipSnap backend answered with an error status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class LoginRequired(BackendError):
    """No valid session; the user has to sign in or enter as guest."""

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message, status_code=401)


class CatalogError(ClientError):
    """The cocktail catalog could not be reached or answered with an error."""
