# tests/test_settings.py
import pytest

from pkg_jwt.adapters.events.dispatcher import EventDispatcher
from pkg_jwt.adapters.pyjwt.encoder import PyJWTEncoder
from pkg_jwt.config.env import settings_from_env
from pkg_jwt.config.settings import JWTSettings
from pkg_jwt.domain.constants import PayloadMergePolicy
from pkg_jwt.domain.entities import InMemoryUser
from pkg_jwt.integrations.common.manager_factory import (
    create_encoder,
    create_jwt_manager,
    create_jwt_manager_from_env,
)

SECRET = "a-very-long-shared-secret-used-only-by-the-test-suite-0123456789"

_ENV_KEYS = [
    "JWT_SECRET_KEY",
    "JWT_PUBLIC_KEY",
    "JWT_PASSPHRASE",
    "JWT_ADDITIONAL_PUBLIC_KEYS",
    "JWT_ALGORITHM",
    "JWT_TOKEN_TTL",
    "JWT_CLOCK_SKEW",
    "JWT_ALLOW_NO_EXPIRATION",
    "JWT_USER_IDENTITY_FIELD",
    "JWT_USER_ID_CLAIM",
    "JWT_ROLES_CLAIM",
    "JWT_MERGE_POLICY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = JWTSettings()

    assert settings.signature_algorithm == "RS256"
    assert settings.token_ttl == 3600
    assert settings.user_identity_field == "username"
    assert settings.merge_policy is PayloadMergePolicy.SUPPLIED_WINS
    assert not settings.is_symmetric


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    monkeypatch.setenv("JWT_ADDITIONAL_PUBLIC_KEYS", "old-1, old-2,")
    monkeypatch.setenv("JWT_TOKEN_TTL", "60")
    monkeypatch.setenv("JWT_CLOCK_SKEW", "5")
    monkeypatch.setenv("JWT_ALLOW_NO_EXPIRATION", "yes")
    monkeypatch.setenv("JWT_USER_ID_CLAIM", "sub")
    monkeypatch.setenv("JWT_ROLES_CLAIM", "roles")
    monkeypatch.setenv("JWT_MERGE_POLICY", "identity_wins")

    settings = settings_from_env()

    assert settings.secret_key == SECRET
    assert settings.is_symmetric
    assert settings.additional_public_keys == ["old-1", "old-2"]
    assert settings.token_ttl == 60
    assert settings.clock_skew == 5
    assert settings.allow_no_expiration
    assert settings.user_id_claim == "sub"
    assert settings.roles_claim == "roles"
    assert settings.merge_policy is PayloadMergePolicy.IDENTITY_WINS


def test_settings_from_env_disables_ttl(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv("JWT_TOKEN_TTL", "none")

    assert settings_from_env().token_ttl is None


def test_settings_from_env_missing_secret():
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        settings_from_env()


@pytest.mark.parametrize(
    "key, value",
    [("JWT_CLOCK_SKEW", "soon"), ("JWT_MERGE_POLICY", "whatever")],
)
def test_settings_from_env_invalid_values(monkeypatch, key, value):
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv(key, value)

    with pytest.raises(RuntimeError):
        settings_from_env()


def test_create_encoder():
    encoder = create_encoder(JWTSettings(secret_key=SECRET, signature_algorithm="HS256"))

    assert isinstance(encoder, PyJWTEncoder)
    assert encoder.signature_algorithm == "HS256"


def test_create_jwt_manager_wiring():
    dispatcher = EventDispatcher()
    settings = JWTSettings(
        secret_key=SECRET,
        signature_algorithm="HS256",
        user_id_claim="sub",
        roles_claim="roles",
    )

    manager = create_jwt_manager(
        settings,
        dispatcher=dispatcher,
        enrichment=lambda user, payload: payload.update(tenant="acme"),
    )

    assert manager.dispatcher is dispatcher
    claims = manager.parse(manager.create(InMemoryUser("user")))
    assert claims["sub"] == "user"
    assert claims["roles"] == ["ROLE_USER"]
    assert claims["tenant"] == "acme"


def test_create_jwt_manager_from_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")

    manager = create_jwt_manager_from_env()

    assert manager.parse(manager.create(InMemoryUser("user")))["username"] == "user"
