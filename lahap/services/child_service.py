# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy.orm import Session

from lahap.models.child import (
    Child,
    Gender,
    MealDuration,
    TexturePreference,
    EatingPatternChange,
    WeightEnergyLevel,
)
from lahap.models.meal_log import MealLog
from lahap.schemas.child_schemas import ChildRequest
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import Forbidden, NotFound, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none
from lahap.utils.validation_utils import parse_enum

RECENT_MEAL_LOGS = 10

# field -> (enum, error message)
CATEGORICAL_FIELDS = {
    "gender": (Gender, "Invalid gender"),
    "meal_duration": (MealDuration, "Invalid meal duration"),
    "texture_preference": (TexturePreference, "Invalid texture preference"),
    "eating_pattern_change": (EatingPatternChange, "Invalid eating pattern change"),
    "weight_energy_level": (WeightEnergyLevel, "Invalid weight energy level"),
}

REQUIRED_FIELDS = ("name", "gender", "age", "height", "weight")


def serialize_child(child: Child, meal_logs=None) -> dict:
    data = {
        "id": child.id,
        "userId": child.user_id,
        "photo": child.photo,
        "name": child.name,
        "gender": child.gender.value,
        "age": child.age,
        "height": child.height,
        "weight": child.weight,
        "favoriteFood": child.favorite_food,
        "hatedFood": child.hated_food,
        "foodAllergies": child.food_allergies or [],
        "refusalBehaviors": child.refusal_behaviors or [],
        "mealDuration": child.meal_duration.value,
        "texturePreference": child.texture_preference.value,
        "eatingPatternChange": child.eating_pattern_change.value,
        "weightEnergyLevel": child.weight_energy_level.value,
        "createdAt": isoformat_or_none(child.created_at),
        "updatedAt": isoformat_or_none(child.updated_at),
    }
    if meal_logs is not None:
        # Imported lazily, meal_log_service depends on this module
        from lahap.services.meal_log_service import serialize_meal_log
        data["mealLogs"] = [serialize_meal_log(log, include_child=False) for log in meal_logs]
    return data


def child_brief(child: Child) -> dict:
    return {"id": child.id, "name": child.name, "photo": child.photo}


def get_owned_child(db: Session, ctx: RequestContext, child_id: int) -> Child:
    """Fetch a child the caller owns: NotFound if absent, Forbidden if someone else's."""
    child = db.query(Child).filter(Child.id == child_id).first()
    if not child:
        raise NotFound("Child not found")
    if child.user_id != ctx.user_id:
        raise Forbidden("Forbidden")
    return child


def list_children(db: Session, ctx: RequestContext) -> list:
    children = (
        db.query(Child)
        .filter(Child.user_id == ctx.user_id)
        .order_by(Child.created_at.desc(), Child.id.desc())
        .all()
    )
    return [serialize_child(c) for c in children]


def create_child(db: Session, ctx: RequestContext, payload: ChildRequest) -> dict:
    if any(getattr(payload, field) in (None, "") for field in REQUIRED_FIELDS):
        raise ValidationFailed("Missing required fields")

    values = {}
    for field, (enum_cls, message) in CATEGORICAL_FIELDS.items():
        values[field] = parse_enum(enum_cls, getattr(payload, field), message)

    child = Child(
        user_id=ctx.user_id,
        photo=payload.photo,
        name=payload.name,
        age=payload.age,
        height=payload.height,
        weight=payload.weight,
        favorite_food=payload.favorite_food,
        hated_food=payload.hated_food,
        food_allergies=payload.food_allergies or [],
        refusal_behaviors=payload.refusal_behaviors or [],
        **values,
    )
    db.add(child)
    db.commit()
    db.refresh(child)
    return serialize_child(child)


def get_child(db: Session, ctx: RequestContext, child_id: int) -> dict:
    child = get_owned_child(db, ctx, child_id)
    recent = (
        db.query(MealLog)
        .filter(MealLog.child_id == child.id)
        .order_by(MealLog.logged_at.desc(), MealLog.id.desc())
        .limit(RECENT_MEAL_LOGS)
        .all()
    )
    return serialize_child(child, meal_logs=recent)


def update_child(db: Session, ctx: RequestContext, child_id: int, payload: ChildRequest) -> dict:
    child = get_owned_child(db, ctx, child_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field in CATEGORICAL_FIELDS:
            if not value:
                continue
            enum_cls, message = CATEGORICAL_FIELDS[field]
            value = parse_enum(enum_cls, value, message)
        elif field in REQUIRED_FIELDS and value in (None, ""):
            # Required columns can't be cleared
            continue
        elif field in ("food_allergies", "refusal_behaviors"):
            value = value or []
        setattr(child, field, value)

    db.commit()
    db.refresh(child)
    return serialize_child(child)


def delete_child(db: Session, ctx: RequestContext, child_id: int) -> None:
    child = get_owned_child(db, ctx, child_id)
    db.delete(child)
    db.commit()
