# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


def format_meal_date(value: datetime) -> str:
    """Normalize to UTC ``YYYY-MM-DDTHH:MM:SS.mmmZ`` so stored dates sort as text."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}T"
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}.{value.microsecond // 1000:03d}Z"
    )


class MealCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    diet: StrictBool
    date: datetime = Field(..., description="ISO8601 timestamp")

    @field_validator("name", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class MealUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    diet: Optional[StrictBool] = None
    date: Optional[datetime] = Field(None, description="ISO8601 timestamp")

    @field_validator("name", "description")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    def changes(self) -> dict:
        """Fields the client actually sent, ready for the store."""
        data = self.model_dump(exclude_none=True)
        if "date" in data:
            data["date"] = format_meal_date(data["date"])
        return data


class Meal(BaseModel):
    id: str
    user_id: str
    name: str
    description: str
    diet: bool
    date: str
    created_at: str
    updated_at: Optional[str] = None


class MealMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_meals: int = Field(0, ge=0, alias="totalMeals")
    meals_on_diet_count: int = Field(0, ge=0, alias="mealsOnDietCount")
    meals_on_non_diet_count: int = Field(0, ge=0, alias="mealsOnNonDietCount")
    longest_streak: int = Field(0, ge=0, alias="longestStreak")
