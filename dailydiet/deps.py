"""
Common dependencies for the application
"""

from __future__ import annotations

from fastapi import Depends, Request

from .auth.security import Principal, get_password_hasher, get_principal, get_token_signer
from .config import Settings
from .errors import NotFound
from .meals.storage import MealStore
from .users.storage import UserStore

__all__ = [
    "get_settings",
    "get_user_store",
    "get_meal_store",
    "get_password_hasher",
    "get_token_signer",
    "get_principal",
    "get_current_user",
]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_meal_store(request: Request) -> MealStore:
    return request.app.state.meal_store


def get_current_user(
    principal: Principal = Depends(get_principal),
    users: UserStore = Depends(get_user_store),
) -> dict:
    """The principal's user row; 404 when the account no longer exists."""
    user = users.find_by_id(principal.id)
    if not user:
        raise NotFound("User not found")
    return user
