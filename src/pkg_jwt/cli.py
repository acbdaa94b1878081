# src/pkg_jwt/cli.py

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Sequence

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .config.env import settings_from_env
from .domain.entities import InMemoryUser
from .integrations.common.manager_factory import create_encoder, create_jwt_manager

DEFAULT_PRIVATE_KEY_PATH = "config/jwt/private.pem"
DEFAULT_PUBLIC_KEY_PATH = "config/jwt/public.pem"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jwt",
        description="Issue JWTs and manage signing keys (settings from JWT_* env vars)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen_token = sub.add_parser("generate-token", help="Issue a token for a user")
    gen_token.add_argument("username", help="Identifier of the user the token is issued for")
    gen_token.add_argument(
        "--ttl",
        type=int,
        help="Override JWT_TOKEN_TTL (seconds, 0 disables the exp claim)",
    )
    gen_token.add_argument(
        "--claim",
        "-c",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra claim; VALUE is parsed as JSON when possible. Repeatable.",
    )
    gen_token.add_argument(
        "--role",
        "-r",
        action="append",
        default=[],
        help="Role of the user (default: ROLE_USER). Repeatable.",
    )

    sub.add_parser(
        "check-config",
        help="Load the configured keys and round-trip a probe token",
    )

    gen_keys = sub.add_parser("generate-keypair", help="Generate an RSA key pair")
    gen_keys.add_argument("--private-out", default=DEFAULT_PRIVATE_KEY_PATH)
    gen_keys.add_argument("--public-out", default=DEFAULT_PUBLIC_KEY_PATH)
    gen_keys.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing key files.",
    )
    gen_keys.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the keys instead of writing them.",
    )
    gen_keys.add_argument("--bits", type=int, default=4096)

    return parser.parse_args(args=argv)


def _parse_claims(pairs: Sequence[str]) -> Dict[str, Any]:
    claims: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid claim {pair!r}, expected KEY=VALUE")
        try:
            claims[key] = json.loads(value)
        except json.JSONDecodeError:
            claims[key] = value
    return claims


def _generate_token(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    if args.ttl is not None:
        settings.token_ttl = args.ttl or None

    manager = create_jwt_manager(settings)
    user = InMemoryUser(args.username, roles=tuple(args.role) or ("ROLE_USER",))
    token = manager.create_from_payload(user, _parse_claims(args.claim))
    return {"token": token}


def _check_config(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    encoder = create_encoder(settings)
    claims = encoder.decode(encoder.encode({"probe": True}))
    return {
        "algorithm": encoder.signature_algorithm,
        "symmetric": encoder.is_symmetric,
        "expires": "exp" in claims,
    }


def _generate_keypair(args: argparse.Namespace) -> dict[str, Any]:
    private_path = Path(args.private_out)
    public_path = Path(args.public_out)
    if not args.dry_run and not args.overwrite:
        existing = [str(p) for p in (private_path, public_path) if p.exists()]
        if existing:
            raise FileExistsError(
                f"Key files already exist: {', '.join(existing)} (use --overwrite)"
            )

    passphrase = os.getenv("JWT_PASSPHRASE")
    encryption: serialization.KeySerializationEncryption = (
        serialization.BestAvailableEncryption(passphrase.encode("utf-8"))
        if passphrase
        else serialization.NoEncryption()
    )

    key = rsa.generate_private_key(public_exponent=65537, key_size=args.bits)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")

    if args.dry_run:
        return {"private_key": private_pem, "public_key": public_pem}

    for path, pem in ((private_path, private_pem), (public_path, public_pem)):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(pem, encoding="utf-8")

    return {
        "private_key_path": str(private_path),
        "public_key_path": str(public_path),
        "encrypted": bool(passphrase),
    }


_COMMANDS = {
    "generate-token": _generate_token,
    "check-config": _check_config,
    "generate-keypair": _generate_keypair,
}


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        summary = _COMMANDS[args.command](args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
