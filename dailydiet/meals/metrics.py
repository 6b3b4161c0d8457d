# -*- coding: utf-8 -*-
"""Meals — adherence metrics (counts and longest on-diet streak)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .models import MealMetrics
from .storage import MealStore


def longest_streak(meals: Iterable[Mapping[str, Any]]) -> int:
    """Longest run of consecutive ``diet`` meals, in the order given."""
    longest = 0
    current = 0
    for meal in meals:
        if meal["diet"]:
            current += 1
            if current > longest:
                longest = current
        else:
            current = 0
    return longest


def compute_metrics(store: MealStore, owner_id: str) -> MealMetrics:
    total = store.count_by_owner(owner_id)
    if total == 0:
        return MealMetrics()

    on_diet = store.count_by_owner(owner_id, diet=True)
    off_diet = store.count_by_owner(owner_id, diet=False)
    meals = store.list_by_owner(owner_id, order_by_date=True)

    return MealMetrics(
        total_meals=total,
        meals_on_diet_count=on_diet,
        meals_on_non_diet_count=off_diet,
        longest_streak=longest_streak(meals),
    )
