# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process configuration.

Everything is read from environment variables once, into an immutable
``Settings`` object that is then passed explicitly to the app factory.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Anchor the default users.yml path to the project root (works well with editable installs).
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_USERS_PATH = BASE_DIR / "data" / "users.yml"

SAMESITE_VALUES = {"lax", "strict", "none"}


@dataclass(frozen=True)
class Settings:
    secret_key: str
    session_salt: str = "csa.session.v1"
    cookie_name: str = "csa_session"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    users_path: Path = DEFAULT_USERS_PATH
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y"}


def _secret_key(env: Mapping[str, str]) -> str:
    for name in ("SECRET_KEY", "CSA_SECRET_KEY"):
        if name in env:
            value = env[name].strip()
            if not value:
                raise RuntimeError(f"{name} is set but empty")
            return value
    # Ephemeral key: sessions do not survive a restart.
    return secrets.token_hex(32)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    samesite = env.get("CSA_COOKIE_SAMESITE", "lax").strip().lower()
    if samesite not in SAMESITE_VALUES:
        raise ValueError(f"CSA_COOKIE_SAMESITE must be one of {sorted(SAMESITE_VALUES)}, got {samesite!r}")

    port_raw = env.get("CSA_PORT", "8000").strip()
    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"CSA_PORT must be an integer, got {port_raw!r}") from None

    log_level = env.get("CSA_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown CSA_LOG_LEVEL {log_level!r}")

    cookie_name = env.get("CSA_COOKIE_NAME", "csa_session").strip()
    if not cookie_name:
        raise ValueError("CSA_COOKIE_NAME must not be empty")

    return Settings(
        secret_key=_secret_key(env),
        session_salt=env.get("CSA_SESSION_SALT", "csa.session.v1"),
        cookie_name=cookie_name,
        cookie_secure=_truthy(env.get("CSA_COOKIE_SECURE", "false")),
        cookie_samesite=samesite,
        users_path=Path(env.get("CSA_USERS_PATH", str(DEFAULT_USERS_PATH))).resolve(),
        host=env.get("CSA_HOST", "0.0.0.0"),
        port=port,
        reload=_truthy(env.get("CSA_RELOAD", "false")),
        log_level=log_level,
    )
