from __future__ import annotations

from typing import Any, Mapping, Optional

from .constants import FailureReason


class JWTFailureError(Exception):
    """Base class for encoding / decoding failures."""

    def __init__(
        self,
        message: str,
        reason: FailureReason = FailureReason.INVALID_TOKEN,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.payload = payload


class EncodingError(JWTFailureError):
    """Raised when a payload cannot be signed (keys, passphrase, algorithm)."""

    def __init__(
        self,
        message: str,
        reason: FailureReason = FailureReason.INVALID_CONFIG,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message, reason, payload)


class DecodingError(JWTFailureError):
    """Raised when a token cannot be turned back into a payload."""
    pass


class TokenExpiredError(DecodingError):
    """Raised when token has expired."""

    def __init__(
        self,
        message: str = "Expired JWT Token",
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message, FailureReason.EXPIRED_TOKEN, payload)


class InvalidTokenError(DecodingError):
    """Raised when token is malformed, unsigned or its signature does not verify."""
    pass


class KeyLoaderError(Exception):
    """Raised when a signature key cannot be found or read."""
    pass
