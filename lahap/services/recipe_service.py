# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from lahap.models.content import Recipe, FavoriteRecipe, ContentStatus, Difficulty
from lahap.schemas.content_schemas import RecipeRequest
from lahap.services.forum_service import author_brief
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import Forbidden, NotFound, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none
from lahap.utils.validation_utils import parse_enum

REQUIRED_FIELDS = (
    "name", "category", "description", "prep_time", "cook_time",
    "difficulty", "servings", "ingredients", "instructions", "nutrition",
)


def require_admin(ctx: Optional[RequestContext]) -> RequestContext:
    if ctx is None or not ctx.is_admin:
        raise Forbidden("Unauthorized")
    return ctx


def serialize_recipe(recipe: Recipe, favorites_count: int, is_favorited: bool) -> dict:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "category": recipe.category,
        "description": recipe.description,
        "image": recipe.image,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "difficulty": recipe.difficulty.value,
        "servings": recipe.servings,
        "ingredients": recipe.ingredients or [],
        "instructions": recipe.instructions or [],
        "nutrition": recipe.nutrition,
        "status": recipe.status.value,
        "source": recipe.source,
        "tags": recipe.tags or [],
        "views": recipe.views,
        "author": author_brief(recipe.author),
        "createdAt": isoformat_or_none(recipe.created_at),
        "updatedAt": isoformat_or_none(recipe.updated_at),
        "favoritesCount": favorites_count,
        "isFavorited": is_favorited,
    }


def _favorite_counts(db: Session, recipe_ids: List[int]) -> dict:
    if not recipe_ids:
        return {}
    rows = (
        db.query(FavoriteRecipe.recipe_id, func.count(FavoriteRecipe.id))
        .filter(FavoriteRecipe.recipe_id.in_(recipe_ids))
        .group_by(FavoriteRecipe.recipe_id)
        .all()
    )
    return dict(rows)


def _favorited_ids(db: Session, ctx: Optional[RequestContext]) -> set:
    if ctx is None:
        return set()
    rows = db.query(FavoriteRecipe.recipe_id).filter(FavoriteRecipe.user_id == ctx.user_id).all()
    return {row.recipe_id for row in rows}


def _matches(recipe: Recipe, search: str) -> bool:
    needle = search.lower()
    return (
        needle in (recipe.name or "").lower()
        or needle in (recipe.description or "").lower()
        or needle in [t.lower() for t in (recipe.tags or [])]
    )


def _visible(recipe: Recipe, ctx: Optional[RequestContext]) -> bool:
    return recipe.status == ContentStatus.PUBLISHED or (ctx is not None and ctx.is_admin)


def list_recipes(
    db: Session,
    ctx: Optional[RequestContext],
    category: Optional[str] = None,
    search: Optional[str] = None,
    favorites: bool = False,
) -> List[dict]:
    query = db.query(Recipe)
    if ctx is None or not ctx.is_admin:
        query = query.filter(Recipe.status == ContentStatus.PUBLISHED)
    if category:
        query = query.filter(Recipe.category == category)

    favorited = _favorited_ids(db, ctx)
    if favorites and ctx is not None:
        query = query.filter(Recipe.id.in_(favorited or [-1]))

    recipes = query.order_by(Recipe.created_at.desc(), Recipe.id.desc()).all()
    if search:
        recipes = [r for r in recipes if _matches(r, search)]

    counts = _favorite_counts(db, [r.id for r in recipes])
    return [serialize_recipe(r, counts.get(r.id, 0), r.id in favorited) for r in recipes]


def _get_visible_recipe(db: Session, ctx: Optional[RequestContext], recipe_id: int) -> Recipe:
    recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
    # Unpublished recipes look absent to everyone but admins
    if not recipe or not _visible(recipe, ctx):
        raise NotFound("Recipe not found")
    return recipe


def get_recipe(db: Session, ctx: Optional[RequestContext], recipe_id: int) -> dict:
    recipe = _get_visible_recipe(db, ctx, recipe_id)

    recipe.views = (recipe.views or 0) + 1
    db.commit()
    db.refresh(recipe)

    counts = _favorite_counts(db, [recipe.id])
    return serialize_recipe(recipe, counts.get(recipe.id, 0), recipe.id in _favorited_ids(db, ctx))


def create_recipe(db: Session, ctx: Optional[RequestContext], payload: RecipeRequest) -> dict:
    ctx = require_admin(ctx)
    if any(getattr(payload, field) in (None, "", []) for field in REQUIRED_FIELDS):
        raise ValidationFailed("Missing required fields")

    recipe = Recipe(
        author_id=ctx.user_id,
        name=payload.name,
        category=payload.category,
        description=payload.description,
        image=payload.image,
        prep_time=payload.prep_time,
        cook_time=payload.cook_time,
        difficulty=parse_enum(Difficulty, (payload.difficulty or "").upper(), "Invalid difficulty"),
        servings=payload.servings,
        ingredients=payload.ingredients,
        instructions=payload.instructions,
        nutrition=payload.nutrition,
        status=parse_enum(ContentStatus, (payload.status or "DRAFT").upper(), "Invalid status"),
        source=payload.source,
        tags=payload.tags or [],
    )
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return serialize_recipe(recipe, 0, False)


def update_recipe(db: Session, ctx: Optional[RequestContext], recipe_id: int, payload: RecipeRequest) -> dict:
    ctx = require_admin(ctx)
    recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
    if not recipe:
        raise NotFound("Recipe not found")

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field == "difficulty":
            value = parse_enum(Difficulty, (value or "").upper(), "Invalid difficulty")
        elif field == "status":
            value = parse_enum(ContentStatus, (value or "").upper(), "Invalid status")
        elif field == "tags":
            value = [t for t in (value or []) if isinstance(t, str)]
        elif value is None and field in REQUIRED_FIELDS:
            continue
        setattr(recipe, field, value)

    db.commit()
    db.refresh(recipe)
    counts = _favorite_counts(db, [recipe.id])
    return serialize_recipe(recipe, counts.get(recipe.id, 0), recipe.id in _favorited_ids(db, ctx))


def delete_recipe(db: Session, ctx: Optional[RequestContext], recipe_id: int) -> None:
    require_admin(ctx)
    recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
    if not recipe:
        raise NotFound("Recipe not found")
    db.delete(recipe)
    db.commit()


def toggle_favorite(db: Session, ctx: RequestContext, recipe_id: int) -> dict:
    recipe = _get_visible_recipe(db, ctx, recipe_id)

    existing = db.query(FavoriteRecipe).filter_by(user_id=ctx.user_id, recipe_id=recipe.id).first()
    if existing:
        db.delete(existing)
        db.commit()
        return {"message": "Recipe unfavorited", "isFavorited": False}

    db.add(FavoriteRecipe(user_id=ctx.user_id, recipe_id=recipe.id))
    db.commit()
    return {"message": "Recipe favorited", "isFavorited": True}
