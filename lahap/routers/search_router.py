# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_request_context
from lahap.services.search_service import search_all
from lahap.utils.auth_utils import RequestContext
from lahap.utils.validation_utils import clamp_limit

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("")
def search(
    q: Optional[str] = None,
    scope: Optional[str] = "all",
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return search_all(db, ctx, q, scope, clamp_limit(limit, 5, 1, 10))
