from __future__ import annotations

import os
from typing import Optional

from ..domain.constants import PayloadMergePolicy
from .settings import JWTSettings


def settings_from_env() -> JWTSettings:
    def _bool(key: str, default: bool = False) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise RuntimeError(f"{key} must be an integer, got {raw!r}") from exc

    def _ttl(key: str, default: Optional[int]) -> Optional[int]:
        raw = os.getenv(key)
        if raw is None:
            return default
        if not raw.strip() or raw.strip().lower() in {"none", "null", "0"}:
            return None
        return _int(key, default or 0)

    def _split_csv(key: str) -> list[str]:
        raw = os.getenv(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    secret_key = os.getenv("JWT_SECRET_KEY")
    if not secret_key:
        raise RuntimeError("Missing JWT settings: JWT_SECRET_KEY")

    raw_policy = os.getenv("JWT_MERGE_POLICY", PayloadMergePolicy.SUPPLIED_WINS.value)
    try:
        merge_policy = PayloadMergePolicy(raw_policy.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(p.value for p in PayloadMergePolicy)
        raise RuntimeError(f"JWT_MERGE_POLICY must be one of: {allowed}") from exc

    return JWTSettings(
        secret_key=secret_key,
        public_key=os.getenv("JWT_PUBLIC_KEY") or None,
        pass_phrase=os.getenv("JWT_PASSPHRASE") or None,
        additional_public_keys=_split_csv("JWT_ADDITIONAL_PUBLIC_KEYS"),
        signature_algorithm=os.getenv("JWT_ALGORITHM", "RS256"),
        token_ttl=_ttl("JWT_TOKEN_TTL", 3600),
        clock_skew=_int("JWT_CLOCK_SKEW", 0),
        allow_no_expiration=_bool("JWT_ALLOW_NO_EXPIRATION", False),
        user_identity_field=os.getenv("JWT_USER_IDENTITY_FIELD", "username"),
        user_id_claim=os.getenv("JWT_USER_ID_CLAIM") or None,
        roles_claim=os.getenv("JWT_ROLES_CLAIM") or None,
        merge_policy=merge_policy,
    )
