# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import or_
from sqlalchemy.orm import Session
from datetime import datetime
from lahap.models.database import SessionLocal
from lahap.models.user import PasswordResetToken
import logging

logger = logging.getLogger("cleanup")

def clean_stale_reset_tokens(now: datetime = None) -> int:
    """Delete reset codes that are expired or already used."""
    now = now or datetime.utcnow()
    db: Session = SessionLocal()
    try:
        count = (
            db.query(PasswordResetToken)
            .filter(
                or_(
                    PasswordResetToken.expires < now,
                    PasswordResetToken.used == True  # noqa: E712
                )
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        logger.info(f"✅ Reset token cleanup completed. Total records deleted: {count}")
        return count

    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Reset token cleanup failed: {e}", exc_info=True)
        raise
    finally:
        db.close()
