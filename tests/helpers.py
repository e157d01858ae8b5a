# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from lahap.utils.auth_utils import RequestContext, session_claims
from lahap.utils.jwt_utils import create_access_token


def ctx_for(user) -> RequestContext:
    return RequestContext(user_id=user.id, email=user.email, role=user.role)


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(session_claims(user))}"}
