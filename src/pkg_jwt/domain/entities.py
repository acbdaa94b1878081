from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .ports import UserIdentity


@dataclass(frozen=True, slots=True)
class InMemoryUser:
    """
    Minimal identity, handy for tests, fixtures and CLI token generation.
    """
    username: str
    password: Optional[str] = field(default=None, repr=False)
    roles: Tuple[str, ...] = ("ROLE_USER",)

    def __post_init__(self) -> None:
        if not self.username:
            raise ValueError("The username cannot be empty.")
        object.__setattr__(self, "roles", tuple(self.roles))

    def identifier(self) -> str:
        return self.username


# --- Credential-bearing holders --------------------------------------------


@dataclass(frozen=True, slots=True)
class AnonymousToken:
    """
    Unauthenticated context. Deliberately exposes no credentials capability.
    """
    user: None = None


@dataclass(frozen=True, slots=True)
class JWTPreAuthenticationToken:
    """
    Raw token extracted from a request, before it has been verified.

    `raw_token` may be None when the transport announced a token but
    delivered nothing.
    """
    raw_token: Optional[str] = None

    def has_credentials(self) -> bool:
        return True

    def credentials(self) -> Optional[str]:
        return self.raw_token


@dataclass(frozen=True, slots=True)
class JWTPostAuthenticationToken:
    """
    Token issued once a JWT has been verified and its user loaded.
    """
    user: UserIdentity
    raw_token: str
    roles: Tuple[str, ...] = ()

    def has_credentials(self) -> bool:
        return True

    def credentials(self) -> Optional[str]:
        return self.raw_token
