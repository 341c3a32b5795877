"""Pydantic schemas for a player's own training records.

Goals, shot ratings, on-court sessions, wellbeing check-ins and
strength plans. All are owned rows: inputs never carry user_id.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ─── Goals ──────────────────────────────────────────────

class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    target: str = Field(..., min_length=1, max_length=200)
    done: bool = False


class GoalRead(BaseModel):
    id: int
    user_id: uuid.UUID
    title: str
    target: str
    done: bool

    model_config = {"from_attributes": True}


# ─── Shots ──────────────────────────────────────────────

class ShotTrend(str, enum.Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class ShotUpsert(BaseModel):
    key: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-z0-9-]+$")
    label: str = Field(..., min_length=1, max_length=100)
    level: int = Field(..., ge=0, le=10)
    trend: ShotTrend = ShotTrend.FLAT


class ShotRead(BaseModel):
    id: int
    user_id: uuid.UUID
    key: str
    label: str
    level: int
    trend: ShotTrend

    model_config = {"from_attributes": True}


# ─── Sessions ───────────────────────────────────────────

class TrainingSessionCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    focus: Optional[str] = Field(None, max_length=200)
    rating: Optional[int] = Field(None, ge=1, le=10)
    minutes: Optional[int] = Field(None, ge=0)
    date: Optional[datetime] = None


class TrainingSessionRead(BaseModel):
    id: int
    user_id: uuid.UUID
    date: datetime
    type: str
    focus: Optional[str] = None
    rating: Optional[int] = None
    minutes: Optional[int] = None

    model_config = {"from_attributes": True}


# ─── Wellbeing ──────────────────────────────────────────

class WellbeingCreate(BaseModel):
    sleep: Optional[int] = Field(None, ge=0, le=10)
    stress: Optional[int] = Field(None, ge=0, le=10)
    energy: Optional[int] = Field(None, ge=0, le=10)
    soreness: Optional[int] = Field(None, ge=0, le=10)
    notes: Optional[str] = None
    date: Optional[datetime] = None


class WellbeingRead(BaseModel):
    id: int
    user_id: uuid.UUID
    date: datetime
    sleep: Optional[int] = None
    stress: Optional[int] = None
    energy: Optional[int] = None
    soreness: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


# ─── Strength plans ─────────────────────────────────────

class StrengthPlanCreate(BaseModel):
    day: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=200)
    items: list[str] = Field(default_factory=list)
    notes: Optional[str] = None


class StrengthPlanRead(BaseModel):
    id: int
    user_id: uuid.UUID
    day: str
    title: str
    items: list[str]
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
