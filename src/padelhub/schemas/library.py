"""Pydantic schemas for the shared tactics and video library."""

import enum
from typing import Optional

from pydantic import BaseModel, Field


class Difficulty(str, enum.Enum):
    BASIC = "Basic"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class TacticCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    difficulty: Difficulty


class TacticRead(BaseModel):
    id: int
    title: str
    description: str
    difficulty: Difficulty

    model_config = {"from_attributes": True}


class VideoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    duration: str = Field(..., pattern=r"^\d{1,3}:\d{2}$")
    category: str = Field(..., min_length=1, max_length=50)
    url: Optional[str] = None


class VideoRead(BaseModel):
    id: int
    title: str
    duration: str
    category: str
    url: Optional[str] = None

    model_config = {"from_attributes": True}
