from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.constants import PayloadMergePolicy


@dataclass(slots=True)
class JWTSettings:
    """
    Key material + token issuance settings.

    Host code decides how to construct this (env, config file, etc.).
    Keys may be file paths or inline PEM; with an HS* algorithm
    `secret_key` is the shared secret itself.
    """
    secret_key: Optional[str] = None
    public_key: Optional[str] = None
    pass_phrase: Optional[str] = None
    additional_public_keys: List[str] = field(default_factory=list)

    signature_algorithm: str = "RS256"
    token_ttl: Optional[int] = 3600
    clock_skew: int = 0
    allow_no_expiration: bool = False

    # Claim wiring
    user_identity_field: str = "username"
    user_id_claim: Optional[str] = None
    roles_claim: Optional[str] = None
    merge_policy: PayloadMergePolicy = PayloadMergePolicy.SUPPLIED_WINS

    @property
    def is_symmetric(self) -> bool:
        return self.signature_algorithm.upper().startswith("HS")
