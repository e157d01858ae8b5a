# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Fernet encryption for free-text columns (meal log notes).

FERNET_SECRET may hold several comma-separated keys. The first one encrypts,
every key is tried on decrypt, so a key can be rotated by prepending the new
one and keeping the old one until rows are re-saved.
"""

import os
from typing import List

from cryptography.fernet import Fernet, MultiFernet
from sqlalchemy.types import TypeDecorator, Text

if os.getenv("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()


def load_fernet(secret: str) -> MultiFernet:
    keys: List[str] = [k.strip() for k in (secret or "").split(",") if k.strip()]
    if not keys:
        raise EnvironmentError("FERNET_SECRET is missing. Please set it in your environment or .env file.")
    try:
        return MultiFernet([Fernet(k) for k in keys])
    except ValueError as e:
        raise ValueError("FERNET_SECRET is invalid. Each key must be a 32-byte url-safe base64 string.") from e


fernet = load_fernet(os.getenv("FERNET_SECRET"))


def encrypt(text: str) -> str:
    return fernet.encrypt(text.encode()).decode()


def decrypt(token: str) -> str:
    return fernet.decrypt(token.encode()).decode()


# 🔐 Text column encrypted at rest, plain str in Python
class EncryptedText(TypeDecorator):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return encrypt(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return decrypt(value)
        return value
