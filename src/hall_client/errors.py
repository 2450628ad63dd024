"""
Hall client error types.

Every error carries a short ``code`` naming the failing layer. The
transcoding engine never raises these; only the ship transport, the channel
and ``+code`` login do, and ``send_message`` turns them into ``False``.
"""

from typing import Any, Optional


class HallError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class HttpError(HallError):
    """The ship answered with a 4xx/5xx status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__("http_error", f"HTTP {status_code}: {body[:200]}", {"status_code": status_code})
        self.status_code = status_code


class AuthError(HallError):
    """``+code`` login was refused, or the ship could not be reached to log in."""

    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class SubscriptionError(HallError):
    def __init__(self, message: str, code: str = "subscription_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConnectionError(HallError):
    """The channel's event stream is not open, or went away mid-request."""

    def __init__(self, message: str):
        super().__init__("connection_error", message)
