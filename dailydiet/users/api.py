# -*- coding: utf-8 -*-
"""Users — API endpoints."""

from __future__ import annotations

import logging
import sqlite3

from fastapi import APIRouter, Depends, Response

from ..auth.security import PasswordHasher, Principal, get_password_hasher, get_principal
from ..deps import get_current_user, get_user_store
from ..errors import ValidationError
from .models import RegisterRequest, UpdateProfileRequest, UserPublic
from .profile import update_profile
from .storage import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(id=row["id"], name=row["name"], email=row["email"])


@router.post("", status_code=201, summary="Register a new user")
def register(
    request: RegisterRequest,
    users: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    password_hash = hasher.hash(request.password)
    try:
        user = users.create(name=request.name, email=request.email, password_hash=password_hash)
    except sqlite3.IntegrityError as exc:
        raise ValidationError("E-mail already registered") from exc
    logger.info("Registered user %s", user["id"])
    return Response(status_code=201)


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return _user_public(user)


@router.put("/{user_id}", response_model=UserPublic, summary="Update a user profile")
def update_user(
    user_id: str,
    request: UpdateProfileRequest,
    principal: Principal = Depends(get_principal),
    users: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    updated = update_profile(
        users,
        hasher,
        principal,
        user_id,
        name=request.name,
        email=request.email,
        new_password=request.new_password,
        current_password=request.current_password,
    )
    return _user_public(updated)
