from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from .constants import JWT_CREATED, JWT_DECODED, JWT_ENCODED
from .ports import UserIdentity


@dataclass(slots=True)
class JWTCreatedEvent:
    """
    Published before encoding.

    Listeners may change `data` (the claims) and `header` in place or
    replace them; whatever is left here after publication gets signed.
    """
    NAME: ClassVar[str] = JWT_CREATED

    data: Dict[str, Any]
    user: UserIdentity
    header: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class JWTEncodedEvent:
    """
    Published right after encoding. Listeners may overwrite `jwt_string`
    (e.g. to wrap it); the manager returns the final value.
    """
    NAME: ClassVar[str] = JWT_ENCODED

    jwt_string: str
    payload: Optional[Dict[str, Any]] = None


@dataclass(slots=True)
class JWTDecodedEvent:
    NAME: ClassVar[str] = JWT_DECODED

    payload: Dict[str, Any]
    _valid: bool = field(default=True, repr=False)

    @property
    def is_valid(self) -> bool:
        return self._valid

    def mark_as_invalid(self) -> None:
        """Reject an otherwise well-signed token (e.g. revoked session)."""
        self._valid = False
