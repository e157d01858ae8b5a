# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from dataclasses import dataclass
from typing import Optional

from lahap.models.user import Role
from lahap.utils.errors import Unauthorized
from lahap.utils.jwt_utils import verify_access_token

SESSION_COOKIE = "session-token"


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, passed explicitly into every service call."""
    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    # Bearer header wins over the browser cookie
    if authorization:
        if not authorization.startswith("Bearer "):
            raise Unauthorized("Invalid authorization format")
        return authorization.replace("Bearer ", "", 1).strip() or None
    return cookie_token or None


def context_from_token(token: str) -> RequestContext:
    payload = verify_access_token(token)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token")

    try:
        role = Role(payload.get("role", Role.USER.value))
    except ValueError:
        raise Unauthorized("Invalid token")

    return RequestContext(user_id=user_id, email=payload.get("email", ""), role=role)


def session_claims(user) -> dict:
    """Claims carried by a session token for ``user``."""
    return {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "name": user.name,
    }
