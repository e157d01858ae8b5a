# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_request_context
from lahap.schemas.report_schemas import ReportGenerateRequest
from lahap.services import report_service
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import InternalError, LahapError

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger(__name__)


# ---------------------- 📊 GENERATE ----------------------
@router.post("/generate", status_code=201)
def generate_report(
    payload: ReportGenerateRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    """
    Aggregate a child's meal logs for one period and upsert the report.
    Safe to retry: the same (child, type, period) always lands on one row.
    """
    try:
        report = report_service.generate_report(
            db,
            ctx,
            child_id=payload.child_id,
            report_type=payload.report_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error generating report: {e}", exc_info=True)
        raise InternalError("Failed to generate report")
    return {"report": report}


# ---------------------- 📚 LIST / VIEW ----------------------
@router.get("")
def list_reports(
    child_id: Optional[int] = Query(None, alias="childId"),
    report_type: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"reports": report_service.list_reports(db, ctx, child_id, report_type)}


@router.get("/{report_id}")
def get_report(report_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"report": report_service.get_report(db, ctx, report_id)}


@router.delete("/{report_id}")
def delete_report(report_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    report_service.delete_report(db, ctx, report_id)
    return {"message": "Report deleted successfully"}
