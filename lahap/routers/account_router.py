# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_request_context
from lahap.schemas.account_schemas import ChangePasswordRequest, ResetConfirmRequest, ResetRequest
from lahap.services import account_service
from lahap.utils.auth_utils import RequestContext
from lahap.utils.rate_limit_utils import RESET_CONFIRM_RATE, RESET_REQUEST_RATE, limiter

router = APIRouter(tags=["Account"])


# ---------------------- 🔑 PASSWORD RESET ----------------------
@router.post("/auth/request-reset")
@limiter.limit(RESET_REQUEST_RATE)
def request_reset(request: Request, payload: ResetRequest, db: Session = Depends(get_db)):
    return account_service.request_password_reset(db, (payload.email or "").strip())


@router.post("/auth/reset/{token}")
@limiter.limit(RESET_CONFIRM_RATE)
def reset_password(request: Request, token: str, payload: ResetConfirmRequest, db: Session = Depends(get_db)):
    return account_service.reset_password(db, token, payload.password)


# ---------------------- 👤 PROFILE ----------------------
@router.post("/profile/change-password")
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return account_service.change_password(db, ctx, payload.old_password, payload.new_password)
