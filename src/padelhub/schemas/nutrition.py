"""Pydantic schemas for nutrition logs and the daily macro goal."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NutritionLogCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    calories: int = Field(..., ge=0)
    protein: int = Field(..., ge=0)
    carbs: int = Field(..., ge=0)
    fat: int = Field(..., ge=0)
    meal_type: str = Field(..., min_length=1, max_length=30)
    date: Optional[datetime] = None


class NutritionLogRead(BaseModel):
    id: int
    user_id: uuid.UUID
    name: str
    calories: int
    protein: int
    carbs: int
    fat: int
    meal_type: str
    date: datetime

    model_config = {"from_attributes": True}


class NutritionGoalUpsert(BaseModel):
    calories: int = Field(..., ge=0)
    protein: int = Field(..., ge=0)
    carbs: int = Field(..., ge=0)
    fat: int = Field(..., ge=0)
    coach_suggestions: Optional[str] = None


class NutritionGoalRead(BaseModel):
    id: int
    user_id: uuid.UUID
    calories: int
    protein: int
    carbs: int
    fat: int
    coach_suggestions: Optional[str] = None

    model_config = {"from_attributes": True}
