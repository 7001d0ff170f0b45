# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, Request

from csa.auth.session import Invalid, SessionSigner, session_user_id
from csa.auth.users import User, UserStore
from csa.config import Settings

logger = logging.getLogger(__name__)


def load_user_from_request(request: Request) -> Optional[User]:
    settings: Settings = request.app.state.settings
    signer: SessionSigner = request.app.state.signer
    store: UserStore = request.app.state.store

    token = request.cookies.get(settings.cookie_name, "")
    result = signer.decode(token)
    if isinstance(result, Invalid):
        # Tampered or foreign cookie: the requester is simply anonymous.
        logger.debug("Ignoring session cookie (%s)", result.reason)
        return None
    user_id = session_user_id(result)
    if user_id is None:
        return None
    return store.get_by_id(user_id)


def current_user_optional(request: Request) -> Optional[User]:
    u = getattr(request.state, "user", None)
    if u is not None:
        return u
    return load_user_from_request(request)


def require_user(request: Request) -> User:
    u = current_user_optional(request)
    if u:
        return u
    raise HTTPException(status_code=401, detail="Unauthorized")


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": settings.cookie_samesite,
        "secure": settings.cookie_secure,
        "path": "/",
    }
