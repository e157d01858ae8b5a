# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Error taxonomy shared by services and routers.

Services raise these; ``main.py`` turns every one of them into a JSON
``{"error": message}`` body with the matching HTTP status.
"""


class LahapError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(LahapError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(LahapError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(LahapError):
    status_code = 404
    default_message = "Not found"


class ValidationFailed(LahapError):
    status_code = 400
    default_message = "Invalid request"


class InternalError(LahapError):
    status_code = 500
