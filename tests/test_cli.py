# tests/test_cli.py
import json

import jwt
import pytest

from pkg_jwt.cli import main
from pkg_jwt.domain.constants import KeyType
from pkg_jwt.adapters.pyjwt.key_loader import RawKeyLoader

SECRET = "a-very-long-shared-secret-used-only-by-the-test-suite-0123456789"


@pytest.fixture
def hs256_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    for key in ("JWT_PUBLIC_KEY", "JWT_PASSPHRASE", "JWT_TOKEN_TTL", "JWT_USER_ID_CLAIM", "JWT_ROLES_CLAIM"):
        monkeypatch.delenv(key, raising=False)


def _output(capsys):
    return json.loads(capsys.readouterr().out)


def test_generate_token(hs256_env, capsys):
    main(["generate-token", "alice", "-c", "tenant=acme", "-c", "level=3", "--ttl", "120"])

    out = _output(capsys)
    assert out["ok"] is True

    claims = jwt.decode(out["token"], SECRET, algorithms=["HS256"])
    assert claims["username"] == "alice"
    assert claims["tenant"] == "acme"
    assert claims["level"] == 3
    assert claims["exp"] - claims["iat"] == 120


def test_generate_token_invalid_claim(hs256_env, capsys):
    with pytest.raises(ValueError):
        main(["generate-token", "alice", "-c", "broken"])

    out = _output(capsys)
    assert out["ok"] is False
    assert "KEY=VALUE" in out["error"]


def test_check_config(hs256_env, capsys):
    main(["check-config"])

    assert _output(capsys) == {
        "ok": True,
        "algorithm": "HS256",
        "symmetric": True,
        "expires": True,
    }


def test_generate_keypair(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("JWT_PASSPHRASE", raising=False)
    private_out = tmp_path / "jwt" / "private.pem"
    public_out = tmp_path / "jwt" / "public.pem"
    args = [
        "generate-keypair",
        "--private-out", str(private_out),
        "--public-out", str(public_out),
        "--bits", "2048",
    ]

    main(args)

    out = _output(capsys)
    assert out["ok"] is True
    assert out["encrypted"] is False
    assert "PRIVATE KEY" in RawKeyLoader(secret_key=str(private_out)).load_key(KeyType.PRIVATE)
    assert "PUBLIC KEY" in public_out.read_text()

    with pytest.raises(FileExistsError):
        main(args)
    capsys.readouterr()

    main(args + ["--overwrite"])
    assert _output(capsys)["ok"] is True


def test_generate_keypair_dry_run(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("JWT_PASSPHRASE", "s3cret")

    main([
        "generate-keypair",
        "--private-out", str(tmp_path / "private.pem"),
        "--public-out", str(tmp_path / "public.pem"),
        "--bits", "2048",
        "--dry-run",
    ])

    out = _output(capsys)
    assert "ENCRYPTED PRIVATE KEY" in out["private_key"]
    assert not (tmp_path / "private.pem").exists()
