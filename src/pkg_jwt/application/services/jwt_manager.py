from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ...domain.constants import JWT_CREATED, JWT_DECODED, JWT_ENCODED, FailureReason, PayloadMergePolicy
from ...domain.events import JWTCreatedEvent, JWTDecodedEvent, JWTEncodedEvent
from ...domain.exceptions import InvalidTokenError
from ...domain.ports import (
    CredentialHolder,
    EventChannel,
    HeaderAwareJWTEncoder,
    JWTEncoder,
    PayloadEnrichment,
    UserIdentity,
)
from .enrichment import EnrichmentFunc, as_enrichment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JWTManager:
    """
    Issues and verifies JWTs for authenticated identities.

    Orchestration only:
    - builds the base claims from the identity
    - lets the optional enrichment and the event listeners shape them
    - delegates signing / verification to the JWTEncoder port

    Holds configuration only, so one instance can serve concurrent calls
    as long as the injected collaborators can.
    """

    encoder: JWTEncoder
    dispatcher: EventChannel
    user_identity_field: str
    payload_enrichment: Optional[PayloadEnrichment | EnrichmentFunc] = None

    user_id_claim: Optional[str] = field(default=None, kw_only=True)
    roles_claim: Optional[str] = field(default=None, kw_only=True)
    merge_policy: PayloadMergePolicy = field(
        default=PayloadMergePolicy.SUPPLIED_WINS, kw_only=True
    )

    def __post_init__(self) -> None:
        if not self.user_identity_field:
            raise ValueError("user_identity_field must be a non-empty string")
        if self.payload_enrichment is not None:
            object.__setattr__(
                self, "payload_enrichment", as_enrichment(self.payload_enrichment)
            )

    @property
    def identity_claim(self) -> str:
        """Claim key the identifier is stored under."""
        return self.user_id_claim or self.user_identity_field

    # ------------------------------------------------------------------ #
    # Issuing
    # ------------------------------------------------------------------ #

    def create(self, user: UserIdentity) -> str:
        """
        Create a signed token for `user`.

        Raises:
            EncodingError (from the encoder)
        """
        payload = self._identity_claims(user)
        return self._encode_and_dispatch(user, payload)

    def create_from_payload(self, user: UserIdentity, payload: Mapping[str, Any]) -> str:
        """
        Create a signed token for `user` carrying the given extra claims.

        `payload` is copied, never mutated. On a clash with the identity
        claims, `merge_policy` decides which side wins.
        """
        base = self._identity_claims(user)
        if self.merge_policy is PayloadMergePolicy.IDENTITY_WINS:
            merged = {**payload, **base}
        else:
            merged = {**base, **payload}
        return self._encode_and_dispatch(user, merged)

    # ------------------------------------------------------------------ #
    # Verifying
    # ------------------------------------------------------------------ #

    def decode(self, token: Any) -> Optional[Dict[str, Any]]:
        """
        Decode the JWT carried by a credential holder.

        Returns None when the holder carries no token at all, or when a
        listener marked the decoded payload as invalid.

        Raises:
            DecodingError (from the encoder) when a token is present but bad
        """
        if not isinstance(token, CredentialHolder) or not token.has_credentials():
            logger.debug("No credentials capability on %s, nothing to decode", type(token).__name__)
            return None

        raw = token.credentials()
        if not raw:
            logger.debug("Empty credentials on %s, nothing to decode", type(token).__name__)
            return None

        event = self._decode_and_dispatch(raw)
        if not event.is_valid:
            logger.warning("Decoded JWT was marked as invalid by a listener")
            return None

        return event.payload

    def parse(self, token: str) -> Dict[str, Any]:
        """
        Decode a raw JWT string.

        Raises:
            DecodingError (from the encoder)
            InvalidTokenError if a listener marked the payload as invalid
        """
        event = self._decode_and_dispatch(token)
        if not event.is_valid:
            raise InvalidTokenError(
                "The token was marked as invalid by an event listener after successful decoding.",
                FailureReason.INVALID_TOKEN,
                event.payload,
            )

        return event.payload

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _identity_claims(self, user: UserIdentity) -> Dict[str, Any]:
        claims: Dict[str, Any] = {}
        if self.roles_claim:
            claims[self.roles_claim] = list(getattr(user, "roles", None) or [])
        claims[self.identity_claim] = self._resolve_identifier(user)
        return claims

    def _resolve_identifier(self, user: UserIdentity) -> Any:
        value = getattr(user, self.user_identity_field, None)
        if value is None:
            return user.identifier()
        return value() if callable(value) else value

    def _encode_and_dispatch(self, user: UserIdentity, payload: Dict[str, Any]) -> str:
        if self.payload_enrichment is not None:
            self.payload_enrichment.enrich(user, payload)

        created = JWTCreatedEvent(data=payload, user=user)
        self.dispatcher.publish(created, JWT_CREATED)

        # encode() stays the default path; headers only go to encoders that opted in
        if created.header and isinstance(self.encoder, HeaderAwareJWTEncoder):
            jwt_string = self.encoder.encode_with_header(created.data, created.header)
        else:
            jwt_string = self.encoder.encode(created.data)
        logger.debug("Encoded JWT with %d claim(s)", len(created.data))

        encoded = JWTEncodedEvent(jwt_string=jwt_string, payload=created.data)
        self.dispatcher.publish(encoded, JWT_ENCODED)

        return encoded.jwt_string

    def _decode_and_dispatch(self, token: str) -> JWTDecodedEvent:
        payload = self.encoder.decode(token)

        event = JWTDecodedEvent(payload=dict(payload))
        self.dispatcher.publish(event, JWT_DECODED)
        return event
