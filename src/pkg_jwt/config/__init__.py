"""
pkg_jwt.config

- JWTSettings: key material and issuance settings.
- settings_from_env: build JWTSettings from JWT_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import JWTSettings

__all__ = ["JWTSettings", "settings_from_env"]
