# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from lahap.models.database import SessionLocal

router = APIRouter(tags=["Infra"])
logger = logging.getLogger(__name__)


@router.get("/healthz")
def health_check():
    db = SessionLocal()
    result = {"db_connection": False}

    try:
        # ✅ Check DB read
        db.execute(text("SELECT 1"))
        result["db_connection"] = True
        return {"status": "ok", "details": result}

    except SQLAlchemyError as e:
        logger.warning(f"⚠️ Health check could not reach the database: {e}")
        return {"status": "error", "error": str(e), "details": result}

    finally:
        db.close()
