# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_optional_context, get_request_context
from lahap.schemas.content_schemas import RecipeRequest
from lahap.services import recipe_service
from lahap.utils.auth_utils import RequestContext

router = APIRouter(prefix="/recipes", tags=["Recipes"])


@router.get("")
def list_recipes(
    category: Optional[str] = None,
    search: Optional[str] = None,
    favorites: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    recipes = recipe_service.list_recipes(
        db, ctx, category=category, search=search, favorites=(favorites or "").lower() == "true"
    )
    return {"recipes": recipes}


@router.post("", status_code=201)
def create_recipe(
    payload: RecipeRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"recipe": recipe_service.create_recipe(db, ctx, payload)}


@router.get("/{recipe_id}")
def get_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    return {"recipe": recipe_service.get_recipe(db, ctx, recipe_id)}


@router.put("/{recipe_id}")
def update_recipe(
    recipe_id: int,
    payload: RecipeRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"recipe": recipe_service.update_recipe(db, ctx, recipe_id, payload)}


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    recipe_service.delete_recipe(db, ctx, recipe_id)
    return {"message": "Recipe deleted successfully"}


@router.post("/{recipe_id}/favorite")
def toggle_favorite(recipe_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return recipe_service.toggle_favorite(db, ctx, recipe_id)
