# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_request_context
from lahap.schemas.meal_log_schemas import MealLogCreateRequest, MealLogUpdateRequest
from lahap.services import meal_log_service
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import InternalError, LahapError

router = APIRouter(prefix="/meal-logs", tags=["Meal Logs"])
logger = logging.getLogger(__name__)


@router.get("")
def list_meal_logs(
    child_id: Optional[int] = Query(None, alias="childId"),
    meal_time: Optional[str] = Query(None, alias="mealTime"),
    child_response: Optional[str] = Query(None, alias="childResponse"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    logs = meal_log_service.list_meal_logs(db, ctx, child_id, meal_time, child_response, start_date, end_date)
    return {"mealLogs": logs}


@router.post("", status_code=201)
def create_meal_log(
    payload: MealLogCreateRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    try:
        log = meal_log_service.create_meal_log(db, ctx, payload)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error creating meal log: {e}", exc_info=True)
        raise InternalError("Failed to create meal log")
    return {"mealLog": log}


@router.get("/{meal_log_id}")
def get_meal_log(meal_log_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"mealLog": meal_log_service.get_meal_log(db, ctx, meal_log_id)}


@router.put("/{meal_log_id}")
def update_meal_log(
    meal_log_id: int,
    payload: MealLogUpdateRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    try:
        log = meal_log_service.update_meal_log(db, ctx, meal_log_id, payload)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error updating meal log {meal_log_id}: {e}", exc_info=True)
        raise InternalError("Failed to update meal log")
    return {"mealLog": log}


@router.delete("/{meal_log_id}")
def delete_meal_log(meal_log_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    meal_log_service.delete_meal_log(db, ctx, meal_log_id)
    return {"message": "Meal log deleted successfully"}
