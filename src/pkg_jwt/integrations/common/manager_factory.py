from __future__ import annotations

from typing import Optional

from ...adapters.events.dispatcher import EventDispatcher
from ...adapters.pyjwt.encoder import PyJWTEncoder
from ...adapters.pyjwt.key_loader import RawKeyLoader
from ...application.services.enrichment import EnrichmentFunc
from ...application.services.jwt_manager import JWTManager
from ...config.env import settings_from_env
from ...config.settings import JWTSettings
from ...domain.ports import EventChannel, JWTEncoder, PayloadEnrichment


def create_encoder(settings: JWTSettings) -> PyJWTEncoder:
    """JWTSettings -> key loader -> PyJWT encoder."""
    key_loader = RawKeyLoader(
        secret_key=settings.secret_key,
        public_key=settings.public_key,
        pass_phrase=settings.pass_phrase,
        additional_public_keys=settings.additional_public_keys,
    )
    return PyJWTEncoder(
        key_loader,
        signature_algorithm=settings.signature_algorithm,
        token_ttl=settings.token_ttl,
        clock_skew=settings.clock_skew,
        allow_no_expiration=settings.allow_no_expiration,
    )


def create_jwt_manager(
        settings: JWTSettings,
        *,
        dispatcher: Optional[EventChannel] = None,
        enrichment: PayloadEnrichment | EnrichmentFunc | None = None,
        encoder: Optional[JWTEncoder] = None,
) -> JWTManager:
    """
    High-level factory: JWTSettings -> JWTManager.

    - builds a PyJWTEncoder unless one is given
    - uses a fresh in-process EventDispatcher unless one is given
    """
    return JWTManager(
        encoder or create_encoder(settings),
        dispatcher if dispatcher is not None else EventDispatcher(),
        settings.user_identity_field,
        enrichment,
        user_id_claim=settings.user_id_claim,
        roles_claim=settings.roles_claim,
        merge_policy=settings.merge_policy,
    )


def create_jwt_manager_from_env(
        *,
        dispatcher: Optional[EventChannel] = None,
        enrichment: PayloadEnrichment | EnrichmentFunc | None = None,
) -> JWTManager:
    """Convenience wrapper using env-configured settings."""
    return create_jwt_manager(
        settings_from_env(),
        dispatcher=dispatcher,
        enrichment=enrichment,
    )
