# -*- coding: utf-8 -*-
"""Users — profile updates with re-authentication for password changes."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from ..auth.security import PasswordHasher, Principal
from ..errors import Forbidden, NotFound, ValidationError
from .storage import UserStore

logger = logging.getLogger(__name__)


def update_profile(
    users: UserStore,
    hasher: PasswordHasher,
    principal: Principal,
    target_id: str,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    new_password: Optional[str] = None,
    current_password: Optional[str] = None,
) -> Dict[str, Any]:
    """Apply a partial profile update to ``target_id`` and return the stored row.

    Only the owner may edit a profile. A password change needs the current
    password; every change is written in a single UPDATE.
    """
    if principal.id != target_id:
        logger.warning("User %s tried to update profile %s", principal.id, target_id)
        raise Forbidden("You are not authorized to update this user")

    user = users.find_by_id(target_id)
    if not user:
        raise NotFound("User not found")

    fields: Dict[str, Any] = {}
    if name is not None:
        fields["name"] = name
    if email is not None:
        fields["email"] = email

    if new_password is not None and not current_password:
        raise Forbidden("Current password is required")

    if new_password is not None:
        if not hasher.verify(current_password, user["password"]):
            raise Forbidden("Current password does not match")
        if not new_password:
            raise ValidationError("New password must not be empty")
        fields["password"] = hasher.hash(new_password)

    try:
        updated = users.update(target_id, fields)
    except sqlite3.IntegrityError as exc:
        raise ValidationError("E-mail already registered") from exc
    if updated is None:
        raise NotFound("User not found")

    logger.info("Updated profile %s (%s)", target_id, ", ".join(sorted(fields)) or "no fields")
    return updated
