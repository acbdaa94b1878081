import logging
import time
from typing import Any, Dict, List, Mapping, Optional

import jwt
from cryptography.hazmat.primitives import serialization
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidKeyError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
    MissingRequiredClaimError,
)

from ...domain.constants import FailureReason, KeyType
from ...domain.exceptions import (
    DecodingError,
    EncodingError,
    InvalidTokenError,
    KeyLoaderError,
    TokenExpiredError,
)
from ...domain.ports import HeaderAwareJWTEncoder, KeyLoader

logger = logging.getLogger(__name__)

# RFC 7519 StringOrURI claims, rejected by the decoder when not strings
STRING_CLAIMS = ("iss", "sub", "jti")


class PyJWTEncoder(HeaderAwareJWTEncoder):
    """
    Adapter implementing the JWTEncoder port using PyJWT.

    Infrastructure layer:
    - Knows about JWT structure, signing and verification.
    - Adds `iat` and, when a TTL is configured, `exp` to issued tokens.
    - Verifies with the public key first, then with each additional public
      key (key rotation).
    """

    def __init__(
        self,
        key_loader: KeyLoader,
        signature_algorithm: str = "RS256",
        token_ttl: Optional[int] = 3600,
        clock_skew: int = 0,
        allow_no_expiration: bool = False,
    ) -> None:
        if signature_algorithm not in jwt.algorithms.get_default_algorithms():
            raise ValueError(f"Unsupported signature algorithm: {signature_algorithm!r}")
        if signature_algorithm == "none":
            raise ValueError("Refusing to issue unsigned tokens")

        self._key_loader = key_loader
        self._algorithm = signature_algorithm
        self._ttl = token_ttl
        self._clock_skew = clock_skew
        self._allow_no_expiration = allow_no_expiration

    @property
    def signature_algorithm(self) -> str:
        return self._algorithm

    @property
    def is_symmetric(self) -> bool:
        return self._algorithm.startswith("HS")

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def encode(self, payload: Mapping[str, Any]) -> str:
        return self.encode_with_header(payload, {})

    def encode_with_header(self, payload: Mapping[str, Any], header: Mapping[str, Any]) -> str:
        """
        Sign the payload.

        `iss`, `sub` and `jti` must be strings, otherwise the token could
        not be decoded again.

        Raises:
            EncodingError
        """
        claims = dict(payload)
        for name in STRING_CLAIMS:
            if name in claims and not isinstance(claims[name], str):
                raise EncodingError(
                    f"The '{name}' claim must be a string, got {type(claims[name]).__name__}",
                    FailureReason.INVALID_TOKEN,
                    claims,
                )

        now = int(time.time())
        claims.setdefault("iat", now)
        if self._ttl is not None:
            claims.setdefault("exp", now + self._ttl)

        try:
            key = self._signing_key()
            return jwt.encode(
                claims,
                key,
                algorithm=self._algorithm,
                headers=dict(header) or None,
            )
        except (KeyLoaderError, InvalidKeyError, ValueError, TypeError) as exc:
            raise EncodingError(
                "An error occurred while trying to encode the JWT token. "
                f"Please verify your configuration (private key/passphrase): {exc}",
                FailureReason.INVALID_CONFIG,
                claims,
            ) from exc

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate the token.

        Returns:
            Dict of token claims.

        Raises:
            TokenExpiredError
            InvalidTokenError
            DecodingError (configuration problems)
        """
        try:
            header = jwt.get_unverified_header(token)
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise InvalidTokenError(f"Invalid JWT Token: {exc}", FailureReason.INVALID_TOKEN) from exc

        if str(header.get("alg", "")).lower() == "none":
            raise InvalidTokenError("Invalid JWT Token: unsigned", FailureReason.UNSIGNED_TOKEN)

        try:
            keys = self._verification_keys()
        except (KeyLoaderError, ValueError, TypeError) as exc:
            raise DecodingError(
                f"Unable to load verification keys: {exc}", FailureReason.INVALID_CONFIG
            ) from exc

        last_error: Optional[Exception] = None
        for key in keys:
            try:
                return self._decode_with_key(token, key)
            except InvalidSignatureError as exc:
                last_error = exc
                continue

        logger.warning("JWT signature could not be verified with %d key(s)", len(keys))
        raise InvalidTokenError(
            "Unable to verify the given JWT through the given configuration. "
            "If the encryption options have been changed since your last authentication, "
            "please renew the token. If the problem persists, verify that the configured "
            "keys/passphrase are valid.",
            FailureReason.UNVERIFIED_TOKEN,
        ) from last_error

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _decode_with_key(self, token: str, key: Any) -> Dict[str, Any]:
        required = [] if self._allow_no_expiration else ["exp"]
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[self._algorithm],
                leeway=self._clock_skew,
                options={"require": required, "verify_aud": False},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Expired JWT Token") from exc
        except InvalidSignatureError:
            raise
        except MissingRequiredClaimError as exc:
            raise InvalidTokenError(
                f"Invalid JWT Token: {exc}", FailureReason.INVALID_TOKEN
            ) from exc
        except InvalidKeyError as exc:
            raise DecodingError(
                f"Invalid verification key: {exc}", FailureReason.INVALID_CONFIG
            ) from exc
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise InvalidTokenError(
                f"Invalid JWT Token: {exc}", FailureReason.INVALID_TOKEN
            ) from exc

    def _signing_key(self) -> Any:
        raw = self._key_loader.load_key(KeyType.PRIVATE)
        if self.is_symmetric:
            return raw
        return self._load_private_key(raw)

    def _verification_keys(self) -> List[Any]:
        keys: List[Any] = [self._key_loader.load_key(KeyType.PUBLIC)]
        keys.extend(self._key_loader.get_additional_public_keys())
        if self.is_symmetric:
            return keys
        # a private key alone is enough to verify: derive its public half
        return [
            self._load_private_key(k).public_key() if "PRIVATE KEY" in k else k
            for k in keys
        ]

    def _load_private_key(self, pem: str) -> Any:
        passphrase = self._key_loader.get_passphrase()
        return serialization.load_pem_private_key(
            pem.encode("utf-8"),
            password=passphrase.encode("utf-8") if passphrase else None,
        )
