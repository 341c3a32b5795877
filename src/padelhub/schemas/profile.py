"""Pydantic schemas for profiles.

Learn: Pydantic v2 models validate request/response data. Separate
"Upsert" schemas (input) from "Read" schemas (output). The owner id is
never part of an input schema; the server stamps it from the identity.
"""

import enum
import uuid
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, enum.Enum):
    PLAYER = "player"
    COACH = "coach"


class ProfileUpsert(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    # Left out on updates to keep the stored role; new profiles default to player.
    role: Optional[Role] = None
    level: Optional[float] = Field(None, ge=0, le=10)
    handedness: Optional[str] = Field(None, max_length=20)
    side: Optional[str] = Field(None, max_length=20)


class ProfileRead(BaseModel):
    id: int
    user_id: uuid.UUID
    role: Role
    name: str
    level: Optional[float] = None
    handedness: Optional[str] = None
    side: Optional[str] = None

    model_config = {"from_attributes": True}


class PendingRoleRead(BaseModel):
    role: Optional[Role] = None
