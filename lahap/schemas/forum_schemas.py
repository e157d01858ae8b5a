# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel
from typing import Any, Optional


class ForumContentRequest(BaseModel):
    content: Optional[str] = None


class VoteRequest(BaseModel):
    # Raw JSON value, checked by forum_service.parse_vote
    value: Any = None
