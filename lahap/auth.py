# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Optional
from fastapi import Cookie, Header
from lahap.models.database import SessionLocal
from lahap.utils.auth_utils import RequestContext, SESSION_COOKIE, context_from_token, extract_token
from lahap.utils.errors import Unauthorized


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_request_context(
    authorization: Optional[str] = Header(None),
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
) -> RequestContext:
    token = extract_token(authorization, session_token)
    if not token:
        raise Unauthorized("Unauthorized")
    return context_from_token(token)


def get_optional_context(
    authorization: Optional[str] = Header(None),
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
) -> Optional[RequestContext]:
    # Public listings treat a bad or missing token as an anonymous visitor
    try:
        token = extract_token(authorization, session_token)
        return context_from_token(token) if token else None
    except Unauthorized:
        return None
