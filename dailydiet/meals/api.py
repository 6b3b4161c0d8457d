# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response

from ..deps import get_current_user, get_meal_store
from ..errors import Forbidden, NotFound
from .metrics import compute_metrics
from .models import Meal, MealCreateRequest, MealMetrics, MealUpdateRequest, format_meal_date
from .storage import MealStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meals", tags=["Meals"])


def _load_owned_meal(store: MealStore, meal_id: str, user: dict, action: str) -> Dict[str, Any]:
    meal = store.get_by_id(meal_id)
    if not meal:
        raise NotFound("Meal not found")
    if meal["user_id"] != user["id"]:
        logger.warning("User %s tried to %s meal %s owned by %s", user["id"], action, meal_id, meal["user_id"])
        raise Forbidden(f"You are not authorized to {action} this meal")
    return meal


@router.post("", status_code=201, response_model=Meal, summary="Create a meal")
def create_meal(
    request: MealCreateRequest,
    user: dict = Depends(get_current_user),
    store: MealStore = Depends(get_meal_store),
):
    meal = store.create(
        owner_id=user["id"],
        name=request.name,
        description=request.description,
        diet=request.diet,
        date=format_meal_date(request.date),
    )
    logger.info("User %s created meal %s", user["id"], meal["id"])
    return meal


@router.get("", response_model=List[Meal], summary="List the caller's meals")
def list_meals(user: dict = Depends(get_current_user), store: MealStore = Depends(get_meal_store)):
    return store.list_by_owner(user["id"], order_by_date=True)


@router.get("/metrics", response_model=MealMetrics, summary="Diet adherence metrics")
def metrics(user: dict = Depends(get_current_user), store: MealStore = Depends(get_meal_store)):
    return compute_metrics(store, user["id"])


@router.get("/{meal_id}", response_model=Meal, summary="Get a meal")
def get_meal(meal_id: str, user: dict = Depends(get_current_user), store: MealStore = Depends(get_meal_store)):
    return _load_owned_meal(store, meal_id, user, "view")


@router.put("/{meal_id}", response_model=Meal, summary="Update a meal")
def update_meal(
    meal_id: str,
    request: MealUpdateRequest,
    user: dict = Depends(get_current_user),
    store: MealStore = Depends(get_meal_store),
):
    _load_owned_meal(store, meal_id, user, "update")
    updated = store.update(meal_id, request.changes())
    if updated is None:
        # Deleted between the ownership check and the write.
        raise NotFound("Meal not found")
    logger.info("User %s updated meal %s", user["id"], meal_id)
    return updated


@router.delete("/{meal_id}", status_code=204, summary="Delete a meal")
def delete_meal(meal_id: str, user: dict = Depends(get_current_user), store: MealStore = Depends(get_meal_store)):
    _load_owned_meal(store, meal_id, user, "delete")
    if not store.delete(meal_id):
        raise NotFound("Meal not found")
    logger.info("User %s deleted meal %s", user["id"], meal_id)
    return Response(status_code=204)
