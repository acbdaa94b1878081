"""
pkg_jwt

Framework-agnostic JWT issuance and verification core: a stateless
manager orchestrating claim building, payload enrichment, signing and
synchronous lifecycle events.
"""

__version__ = "0.1.0"

from .domain.constants import (
    JWT_CREATED,
    JWT_DECODED,
    JWT_ENCODED,
    FailureReason,
    KeyType,
    PayloadMergePolicy,
)
from .domain.entities import (
    AnonymousToken,
    InMemoryUser,
    JWTPostAuthenticationToken,
    JWTPreAuthenticationToken,
)
from .domain.events import JWTCreatedEvent, JWTDecodedEvent, JWTEncodedEvent
from .domain.exceptions import (
    DecodingError,
    EncodingError,
    InvalidTokenError,
    JWTFailureError,
    KeyLoaderError,
    TokenExpiredError,
)
from .domain.ports import (
    CredentialHolder,
    EventChannel,
    HeaderAwareJWTEncoder,
    JWTEncoder,
    KeyLoader,
    PayloadEnrichment,
    UserIdentity,
)

from .application.services.enrichment import CallableEnrichment, ChainEnrichment, NullEnrichment
from .application.services.jwt_manager import JWTManager

from .adapters.events.dispatcher import EventDispatcher
from .adapters.pyjwt.encoder import PyJWTEncoder
from .adapters.pyjwt.key_loader import RawKeyLoader

from .config.settings import JWTSettings
from .config.env import settings_from_env
from .integrations.common.manager_factory import (
    create_encoder,
    create_jwt_manager,
    create_jwt_manager_from_env,
)

__all__ = [
    "__version__",
    # event names
    "JWT_CREATED",
    "JWT_ENCODED",
    "JWT_DECODED",
    # domain core
    "FailureReason",
    "KeyType",
    "PayloadMergePolicy",
    "InMemoryUser",
    "AnonymousToken",
    "JWTPreAuthenticationToken",
    "JWTPostAuthenticationToken",
    "JWTCreatedEvent",
    "JWTEncodedEvent",
    "JWTDecodedEvent",
    # ports
    "UserIdentity",
    "CredentialHolder",
    "JWTEncoder",
    "HeaderAwareJWTEncoder",
    "EventChannel",
    "PayloadEnrichment",
    "KeyLoader",
    # exceptions
    "JWTFailureError",
    "EncodingError",
    "DecodingError",
    "TokenExpiredError",
    "InvalidTokenError",
    "KeyLoaderError",
    # services
    "JWTManager",
    "NullEnrichment",
    "CallableEnrichment",
    "ChainEnrichment",
    # adapters
    "EventDispatcher",
    "PyJWTEncoder",
    "RawKeyLoader",
    # config / wiring
    "JWTSettings",
    "settings_from_env",
    "create_encoder",
    "create_jwt_manager",
    "create_jwt_manager_from_env",
]
