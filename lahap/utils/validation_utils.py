# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

import math
from typing import Optional
from lahap.utils.errors import ValidationFailed


def parse_enum(enum_cls, value, message: str):
    """Coerce ``value`` into ``enum_cls`` or raise ValidationFailed(message)."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationFailed(message)


def parse_optional_enum(enum_cls, value):
    # Unknown values are treated as "no filter"
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def parse_limit(value: Optional[str], fallback: int, maximum: int) -> int:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(n) or n <= 0 or n > maximum:
        return fallback
    return int(n)


def clamp_limit(value: Optional[str], fallback: int, minimum: int, maximum: int) -> int:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(n):
        return fallback
    return min(maximum, max(minimum, int(n)))
