"""
Mounjaro Tracker Backend — Profile Schemas
============================================

What:  Request/response models for onboarding completion and /api/profile.

Ranges mirror the onboarding form:
    age 18-120, height 100-250 cm, weights 20-500 kg,
    goal weight strictly below starting weight.

The settings form is stricter on weight (30-500 kg). Only submitted fields
are range-checked, so a 25 kg onboarding value survives edits to other
fields. On update only preferred_injection_day may be cleared
with null, and goal < start is checked against the merged row by
ProfileService.update().
"""

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Gender = Literal["male", "female", "other", "prefer_not_to_say"]

GOAL_ABOVE_START_MESSAGE = "Goal weight must be less than your starting weight"


class ProfileCreate(BaseModel):
    """Body of POST /api/onboarding/complete."""
    age: int = Field(ge=18, le=120)
    gender: Gender
    height_cm: float = Field(ge=100, le=250)
    starting_weight_kg: float = Field(ge=20, le=500)
    goal_weight_kg: float = Field(ge=20, le=500)
    treatment_start_date: date
    preferred_injection_day: Optional[int] = Field(default=None, ge=0, le=6)
    reminder_days_before: int = Field(default=1, ge=0, le=7)

    @model_validator(mode="after")
    def goal_below_start(self) -> "ProfileCreate":
        if self.goal_weight_kg >= self.starting_weight_kg:
            raise ValueError(GOAL_ABOVE_START_MESSAGE)
        return self


class ProfileUpdate(BaseModel):
    """Body of PUT /api/profile; only supplied fields change."""
    age: Optional[int] = Field(default=None, ge=18, le=120)
    gender: Optional[Gender] = None
    height_cm: Optional[float] = Field(default=None, ge=100, le=250)
    starting_weight_kg: Optional[float] = Field(default=None, ge=30, le=500)
    goal_weight_kg: Optional[float] = Field(default=None, ge=30, le=500)
    treatment_start_date: Optional[date] = None
    preferred_injection_day: Optional[int] = Field(default=None, ge=0, le=6)
    reminder_days_before: Optional[int] = Field(default=None, ge=0, le=7)

    # Omitted means "leave as is"; an explicit null is only meaningful for
    # the injection day
    @field_validator(
        "age",
        "gender",
        "height_cm",
        "starting_weight_kg",
        "goal_weight_kg",
        "treatment_start_date",
        "reminder_days_before",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("This field cannot be cleared")
        return value


class ProfileResponse(BaseModel):
    id: uuid.UUID
    age: int
    gender: str
    height_cm: float
    starting_weight_kg: float
    goal_weight_kg: float
    treatment_start_date: date
    preferred_injection_day: Optional[int]
    reminder_days_before: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OnboardingCompleteResponse(BaseModel):
    success: bool = True
    profile: ProfileResponse
    redirect_to: str = "/summary"
