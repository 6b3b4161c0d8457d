# -*- coding: utf-8 -*-
"""Auth — session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from ..config import Settings
from ..deps import get_settings, get_user_store
from ..errors import TOKEN_COOKIE_NAME, Unauthorized
from ..users.storage import UserStore
from .models import LoginRequest
from .security import PasswordHasher, TokenSigner, authenticate_credentials, get_password_hasher, get_token_signer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def _set_auth_cookie(resp: Response, token: str, settings: Settings) -> None:
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=int(settings.token_ttl_seconds),
        path="/",
    )


@router.post("", summary="Login")
def login(
    request: LoginRequest,
    response: Response,
    users: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_settings),
):
    user = authenticate_credentials(users, hasher, request.email, request.password)
    if not user:
        logger.info("Failed login for %s", request.email.lower().strip())
        raise Unauthorized("E-mail or password wrong")

    token = signer.sign(user["id"])
    _set_auth_cookie(response, token, settings)
    logger.info("User %s logged in", user["id"])
    return {"status": "ok"}


@router.delete("", status_code=204, summary="Logout")
def logout():
    response = Response(status_code=204)
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return response
