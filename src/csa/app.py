# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from csa.auth.session import SESSION_USER_KEY, SessionSigner
from csa.auth.users import User, UserStore
from csa.config import Settings, load_settings
from csa.logs import configure_logging
from csa.permissions import cookie_settings, current_user_optional, require_user

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str


# ------------------ Routes ------------------


@router.post("/login")
def login(body: LoginRequest, request: Request):
    settings: Settings = request.app.state.settings
    signer: SessionSigner = request.app.state.signer
    store: UserStore = request.app.state.store

    u = store.get(body.username)
    if not u:
        logger.info("Login rejected: unknown user")
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = signer.encode({SESSION_USER_KEY: u.id})
    resp = JSONResponse(u.public())
    resp.set_cookie(settings.cookie_name, token, **cookie_settings(settings))
    logger.info("User %r (id=%s) logged in", u.username, u.id)
    return resp


@router.get("/check_session")
@router.get("/me")
def check_session(user: User = Depends(require_user)):
    return user.public()


@router.delete("/logout", status_code=204)
def logout(request: Request):
    settings: Settings = request.app.state.settings
    u = current_user_optional(request)
    resp = Response(status_code=204)
    resp.delete_cookie(settings.cookie_name, **cookie_settings(settings))
    if u:
        logger.info("User %r (id=%s) logged out", u.username, u.id)
    return resp


def create_app(settings: Optional[Settings] = None, store: Optional[UserStore] = None) -> FastAPI:
    """Build the API with explicit configuration.

    ``store`` overrides the YAML store at ``settings.users_path``.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Cookie Session Auth")
    app.state.settings = settings
    app.state.signer = SessionSigner(settings.secret_key, salt=settings.session_salt)
    app.state.store = store if store is not None else UserStore(settings.users_path)

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.user = current_user_optional(request)
        return await call_next(request)

    app.include_router(router)
    return app


app = create_app()
