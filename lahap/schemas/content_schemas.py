# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any


class RecipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    prep_time: Optional[int] = Field(None, alias="prepTime")
    cook_time: Optional[int] = Field(None, alias="cookTime")
    difficulty: Optional[str] = None
    servings: Optional[int] = None
    ingredients: Optional[List[Any]] = None
    instructions: Optional[List[Any]] = None
    nutrition: Optional[dict] = None
    status: Optional[str] = None
    source: Optional[str] = None
    tags: Optional[List[str]] = None


class ArticleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    thumbnail_image: Optional[str] = Field(None, alias="thumbnailImage")
    hero_image: Optional[str] = Field(None, alias="heroImage")
