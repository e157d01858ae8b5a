# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
import os
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lahap.models.user import User, PasswordResetToken
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import InternalError, NotFound, ValidationFailed
from lahap.utils.password_utils import MIN_PASSWORD_LENGTH, hash_password, verify_password

logger = logging.getLogger(__name__)

RESET_CODE_TTL_MINUTES = int(os.getenv("RESET_CODE_TTL_MINUTES", "60"))
RESET_CODE_ATTEMPTS = 5


def generate_reset_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def _is_unique_violation(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "violates unique constraint"
    return "unique" in str(exc.orig).lower()


def request_password_reset(db: Session, email: Optional[str]) -> dict:
    """
    Issue a 6-digit reset code for ``email``.

    Codes are unique across the table; a collision is retried with a fresh
    code, up to RESET_CODE_ATTEMPTS times.
    """
    if not email:
        raise ValidationFailed("Email is required.")

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFound("No account found for that email.")
    user_id = user.id

    expires = datetime.utcnow() + timedelta(minutes=RESET_CODE_TTL_MINUTES)

    code = None
    for attempt in range(1, RESET_CODE_ATTEMPTS + 1):
        candidate = generate_reset_code()
        db.add(PasswordResetToken(token=candidate, user_id=user_id, expires=expires))
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not _is_unique_violation(e):
                raise
            logger.warning(f"⚠️ Reset code collision for user {user_id} (attempt {attempt})")
            continue
        code = candidate
        break

    if code is None:
        raise InternalError("Unable to generate reset code. Try again.")

    logger.info(f"🔑 Reset code issued for user {user_id}")
    return {
        "success": True,
        "message": "Reset code generated.",
        "token": code,
        "resetPath": f"/auth/reset/{code}",
    }


def reset_password(db: Session, token: str, password: Optional[str]) -> dict:
    if not token or not password:
        raise ValidationFailed("Token and password are required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    reset = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
    if not reset:
        raise ValidationFailed("Invalid or expired token.")
    if reset.used:
        raise ValidationFailed("This token has already been used.")
    if reset.expires < datetime.utcnow():
        raise ValidationFailed("Token expired.")

    reset.user.hashed_password = hash_password(password)
    reset.used = True
    db.commit()

    logger.info(f"✅ Password reset for user {reset.user_id}")
    return {"success": True, "message": "Password has been reset."}


def change_password(db: Session, ctx: RequestContext, old_password: Optional[str], new_password: Optional[str]) -> dict:
    if not old_password or not new_password:
        raise ValidationFailed("Old password and new password are required.")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"New password must be at least {MIN_PASSWORD_LENGTH} characters.")

    user = db.query(User).filter(User.id == ctx.user_id).first()
    if not user:
        raise NotFound("User not found")
    if not verify_password(old_password, user.hashed_password):
        raise ValidationFailed("Old password is incorrect.")

    user.hashed_password = hash_password(new_password)
    db.commit()
    return {"success": True, "message": "Password updated."}
