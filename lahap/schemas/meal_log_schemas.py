# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class MealLogCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    child_id: Optional[int] = Field(None, alias="childId")
    photo: Optional[str] = None
    food_name: Optional[str] = Field(None, alias="foodName")
    meal_time: Optional[str] = Field(None, alias="mealTime")
    child_response: Optional[str] = Field(None, alias="childResponse")
    notes: Optional[str] = None
    logged_at: Optional[datetime] = Field(None, alias="loggedAt")


class MealLogUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photo: Optional[str] = None
    food_name: Optional[str] = Field(None, alias="foodName")
    meal_time: Optional[str] = Field(None, alias="mealTime")
    child_response: Optional[str] = Field(None, alias="childResponse")
    notes: Optional[str] = None
