# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
from slowapi import Limiter
from slowapi.util import get_remote_address

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() != "false"

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

# Account recovery endpoints hand out short numeric codes
RESET_REQUEST_RATE = "5/minute"
RESET_CONFIRM_RATE = "10/minute"
