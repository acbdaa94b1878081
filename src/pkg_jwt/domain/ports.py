from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Protocol, runtime_checkable

from .constants import KeyType


class UserIdentity(Protocol):
    """
    Authenticated principal a token is issued for.

    Only `identifier()` is required. The manager may also read an attribute
    named after its configured identity field, and `roles` when a roles
    claim is configured.
    """

    def identifier(self) -> str:
        ...


@runtime_checkable
class CredentialHolder(Protocol):
    """
    Request/token wrapper that may carry a raw JWT.

    Objects that do not implement this capability at all are treated by the
    manager as carrying no credentials.
    """

    def has_credentials(self) -> bool:
        ...

    def credentials(self) -> Optional[str]:
        """Raw token string, or None when the holder carries nothing."""
        ...


@runtime_checkable
class JWTEncoder(Protocol):
    """
    Port for turning a claims payload into a signed token and back.

    Implementations live in the adapters layer (e.g. the PyJWT encoder).
    """

    def encode(self, payload: Mapping[str, Any]) -> str:
        """
        Sign the given payload.

        Raises:
          - EncodingError
        """
        ...

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify the given token.

        Should:
          - verify signature
          - check expiry
        Raises:
          - TokenExpiredError
          - InvalidTokenError
          - or another DecodingError
        """
        ...


class HeaderAwareJWTEncoder(ABC):
    """
    Encoder that also accepts extra JOSE header fields.

    Encoders opt in by subclassing. An object that only happens to have
    an `encode_with_header` attribute is not header-aware.
    """

    @abstractmethod
    def encode(self, payload: Mapping[str, Any]) -> str:
        ...

    @abstractmethod
    def decode(self, token: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def encode_with_header(
        self, payload: Mapping[str, Any], header: Mapping[str, Any]
    ) -> str:
        ...


class EventChannel(Protocol):
    """Synchronous, ordered delivery of lifecycle events to listeners."""

    def publish(self, event: Any, event_name: Optional[str] = None) -> Any:
        ...


class PayloadEnrichment(Protocol):
    def enrich(self, user: UserIdentity, payload: MutableMapping[str, Any]) -> None:
        """Add or overwrite claims of `payload` in place."""
        ...


class KeyLoader(Protocol):
    def load_key(self, key_type: KeyType) -> str:
        ...

    def get_passphrase(self) -> Optional[str]:
        ...

    def get_additional_public_keys(self) -> List[str]:
        ...
