# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from lahap.models.meal_log import MealLog, MealTime, ChildResponse
from lahap.schemas.meal_log_schemas import MealLogCreateRequest, MealLogUpdateRequest
from lahap.services.child_service import child_brief, get_owned_child
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import Forbidden, NotFound, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none, to_naive_utc
from lahap.utils.validation_utils import parse_enum


def serialize_meal_log(log: MealLog, include_child: bool = True) -> dict:
    data = {
        "id": log.id,
        "childId": log.child_id,
        "photo": log.photo,
        "foodName": log.food_name,
        "mealTime": log.meal_time.value,
        "childResponse": log.child_response.value,
        "notes": log.notes,
        "loggedAt": isoformat_or_none(log.logged_at),
        "createdAt": isoformat_or_none(log.created_at),
        "updatedAt": isoformat_or_none(log.updated_at),
    }
    if include_child:
        data["child"] = child_brief(log.child)
    return data


def _get_owned_meal_log(db: Session, ctx: RequestContext, meal_log_id: int) -> MealLog:
    log = db.query(MealLog).filter(MealLog.id == meal_log_id).first()
    if not log:
        raise NotFound("Meal log not found")
    if log.child.user_id != ctx.user_id:
        raise Forbidden("Forbidden")
    return log


def list_meal_logs(
    db: Session,
    ctx: RequestContext,
    child_id: Optional[int],
    meal_time: Optional[str] = None,
    child_response: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> list:
    if not child_id:
        raise ValidationFailed("childId is required")

    child = get_owned_child(db, ctx, child_id)
    query = db.query(MealLog).filter(MealLog.child_id == child.id)

    if meal_time:
        query = query.filter(MealLog.meal_time == parse_enum(MealTime, meal_time, "Invalid meal time"))
    if child_response:
        query = query.filter(
            MealLog.child_response == parse_enum(ChildResponse, child_response, "Invalid child response")
        )
    if start_date:
        query = query.filter(MealLog.logged_at >= to_naive_utc(start_date))
    if end_date:
        query = query.filter(MealLog.logged_at <= to_naive_utc(end_date))

    logs = query.order_by(MealLog.logged_at.desc(), MealLog.id.desc()).all()
    return [serialize_meal_log(log) for log in logs]


def create_meal_log(db: Session, ctx: RequestContext, payload: MealLogCreateRequest) -> dict:
    if not payload.child_id or not payload.food_name or not payload.meal_time or not payload.child_response:
        raise ValidationFailed("Missing required fields")

    child = get_owned_child(db, ctx, payload.child_id)
    meal_time = parse_enum(MealTime, payload.meal_time, "Invalid meal time")
    child_response = parse_enum(ChildResponse, payload.child_response, "Invalid child response")

    log = MealLog(
        child_id=child.id,
        photo=payload.photo,
        food_name=payload.food_name,
        meal_time=meal_time,
        child_response=child_response,
        notes=payload.notes,
        logged_at=to_naive_utc(payload.logged_at) or datetime.utcnow(),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return serialize_meal_log(log)


def get_meal_log(db: Session, ctx: RequestContext, meal_log_id: int) -> dict:
    return serialize_meal_log(_get_owned_meal_log(db, ctx, meal_log_id))


def update_meal_log(db: Session, ctx: RequestContext, meal_log_id: int, payload: MealLogUpdateRequest) -> dict:
    log = _get_owned_meal_log(db, ctx, meal_log_id)
    changes = payload.model_dump(exclude_unset=True)

    if "photo" in changes:
        log.photo = changes["photo"]
    if changes.get("food_name"):
        log.food_name = changes["food_name"]
    if changes.get("meal_time"):
        log.meal_time = parse_enum(MealTime, changes["meal_time"], "Invalid meal time")
    if changes.get("child_response"):
        log.child_response = parse_enum(ChildResponse, changes["child_response"], "Invalid child response")
    if "notes" in changes:
        log.notes = changes["notes"]

    db.commit()
    db.refresh(log)
    return serialize_meal_log(log)


def delete_meal_log(db: Session, ctx: RequestContext, meal_log_id: int) -> None:
    log = _get_owned_meal_log(db, ctx, meal_log_id)
    db.delete(log)
    db.commit()
