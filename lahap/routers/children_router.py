# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_request_context
from lahap.schemas.child_schemas import ChildRequest
from lahap.services import child_service
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import InternalError, LahapError

router = APIRouter(prefix="/children", tags=["Children"])
logger = logging.getLogger(__name__)


@router.get("")
def list_children(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"children": child_service.list_children(db, ctx)}


@router.post("", status_code=201)
def create_child(
    payload: ChildRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    try:
        child = child_service.create_child(db, ctx, payload)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error creating child: {e}", exc_info=True)
        raise InternalError("Failed to create child")
    return {"child": child}


@router.get("/{child_id}")
def get_child(child_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"child": child_service.get_child(db, ctx, child_id)}


@router.put("/{child_id}")
def update_child(
    child_id: int,
    payload: ChildRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    try:
        child = child_service.update_child(db, ctx, child_id, payload)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error updating child {child_id}: {e}", exc_info=True)
        raise InternalError("Failed to update child")
    return {"child": child}


@router.delete("/{child_id}")
def delete_child(child_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    child_service.delete_child(db, ctx, child_id)
    return {"message": "Child deleted successfully"}
