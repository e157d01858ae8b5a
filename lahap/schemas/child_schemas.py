# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class ChildRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photo: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None          # months
    height: Optional[float] = None
    weight: Optional[float] = None
    favorite_food: Optional[str] = Field(None, alias="favoriteFood")
    hated_food: Optional[str] = Field(None, alias="hatedFood")
    food_allergies: Optional[List[str]] = Field(None, alias="foodAllergies")
    refusal_behaviors: Optional[List[str]] = Field(None, alias="refusalBehaviors")
    meal_duration: Optional[str] = Field(None, alias="mealDuration")
    texture_preference: Optional[str] = Field(None, alias="texturePreference")
    eating_pattern_change: Optional[str] = Field(None, alias="eatingPatternChange")
    weight_energy_level: Optional[str] = Field(None, alias="weightEnergyLevel")
