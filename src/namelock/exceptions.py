"""Custom exception hierarchy for namelock."""

from __future__ import annotations


class NameLockError(Exception):
    """Base exception for all namelock errors."""


class ConfigError(NameLockError):
    """Invalid or missing configuration."""


class AppStateError(NameLockError):
    """Credential file is missing, unreadable or malformed.

    This is the only fatal error: the process exits before any session
    is established.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class TransportError(NameLockError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ApiError(NameLockError):
    """The messaging gateway answered with an error body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class AuthenticationError(ApiError):
    """Login failed or the app state cookies were rejected."""


class NotificationStreamError(NameLockError):
    """Transport-level failure on the notification stream.

    Instances are *yielded* by :meth:`namelock.client.ThreadClient.listen`
    in place of a notification rather than raised, so a single bad frame
    or disconnect never ends the subscription.
    """
