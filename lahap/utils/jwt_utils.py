# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Signed session tokens.

Tokens carry the claims from ``auth_utils.session_claims`` plus ``iss``,
``iat`` and ``exp``. Only tokens issued by this service with an expiry are
accepted.
"""

import os
from datetime import datetime, timedelta
from jose import ExpiredSignatureError, JWTError, jwt
from lahap.utils.errors import Unauthorized

if os.getenv("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("JWT_SECRET_KEY environment variable is not set.")

ALGORITHM = "HS256"
TOKEN_ISSUER = "lahap"
SESSION_TTL = timedelta(days=int(os.getenv("SESSION_TTL_DAYS", "7")))


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    issued_at = datetime.utcnow()
    claims = {
        **data,
        "iss": TOKEN_ISSUER,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or SESSION_TTL),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=TOKEN_ISSUER,
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise Unauthorized("Session expired")
    except JWTError:
        raise Unauthorized("Invalid token")
