from enum import Enum

# Event names, used as routing keys by the event channel.
JWT_CREATED = "lexik_jwt_authentication.on_jwt_created"
JWT_ENCODED = "lexik_jwt_authentication.on_jwt_encoded"
JWT_DECODED = "lexik_jwt_authentication.on_jwt_decoded"


class FailureReason(str, Enum):
    INVALID_CONFIG = "invalid_config"
    UNSIGNED_TOKEN = "unsigned_token"
    INVALID_TOKEN = "invalid_token"
    UNVERIFIED_TOKEN = "unverified_token"
    EXPIRED_TOKEN = "expired_token"


class KeyType(Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class PayloadMergePolicy(Enum):
    SUPPLIED_WINS = "supplied_wins"
    IDENTITY_WINS = "identity_wins"
