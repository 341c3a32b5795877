"""Pydantic schemas for coach links and feedback notes.

Learn: FeedbackCreate deliberately has no coach/player id fields. Extra
keys in the request body are ignored, and the service stamps both ids
from the authenticated coach and the URL.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LinkPlayerRequest(BaseModel):
    # Optional here so a missing email reaches the access check and gets
    # the same "Player email is required" answer as a blank one.
    email: Optional[str] = None


class CoachLinkRead(BaseModel):
    id: int
    coach_user_id: uuid.UUID
    player_user_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class LinkedPlayerRead(BaseModel):
    player_user_id: uuid.UUID
    name: str
    email: str
    role: str = "player"
    level: Optional[float] = None


class FeedbackCategory(str, enum.Enum):
    GENERAL = "general"
    TECHNIQUE = "technique"
    FITNESS = "fitness"
    NUTRITION = "nutrition"
    MENTAL = "mental"
    TACTICS = "tactics"


class FeedbackCreate(BaseModel):
    category: FeedbackCategory = FeedbackCategory.GENERAL
    message: str = Field(..., min_length=1, max_length=5000)


class FeedbackRead(BaseModel):
    id: int
    coach_user_id: uuid.UUID
    player_user_id: uuid.UUID
    category: FeedbackCategory
    message: str
    created_at: datetime
    coach_name: Optional[str] = None

    model_config = {"from_attributes": True}
