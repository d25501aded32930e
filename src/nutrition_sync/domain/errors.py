"""Error taxonomy for authentication and synchronization."""

from enum import StrEnum


class AuthErrorCode(StrEnum):
    """Stable codes for authentication failures."""

    EMAIL_IN_USE = "email-in-use"
    ACCOUNT_NOT_FOUND = "account-not-found"
    WRONG_PASSWORD = "wrong-password"
    INVALID_EMAIL = "invalid-email"
    WEAK_PASSWORD = "weak-password"


_AUTH_MESSAGES = {
    AuthErrorCode.EMAIL_IN_USE: "Email already in use",
    AuthErrorCode.ACCOUNT_NOT_FOUND: "Account not found",
    AuthErrorCode.WRONG_PASSWORD: "Incorrect password",
    AuthErrorCode.INVALID_EMAIL: "Invalid email address",
    AuthErrorCode.WEAK_PASSWORD: "Password is too weak",
}


class SyncError(Exception):
    """Base error for the sync layer."""

    default_code = "sync-error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, str]:
        """Return a serializable representation of the error."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }


class AuthError(SyncError):
    """Raised when sign-up or sign-in is rejected."""

    def __init__(self, code: AuthErrorCode, message: str | None = None) -> None:
        super().__init__(message or _AUTH_MESSAGES[code], code=code.value)
        self.auth_code = code


class RemoteUnavailable(SyncError):
    """The remote backend could not serve this call."""

    default_code = "remote-unavailable"


class NotAuthenticated(SyncError):
    """An operation needed a session and none is active."""

    default_code = "not-authenticated"

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class RemoteAuthRejected(SyncError):
    """The remote identity provider rejected a request.

    ``code`` carries the provider-neutral rejection code, one of
    ``user-not-found``, ``wrong-password``, ``email-already-in-use``,
    ``invalid-email`` or ``weak-password``.
    """

    default_code = "auth-error"
