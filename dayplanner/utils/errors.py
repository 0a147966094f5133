# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


class PlannerError(Exception):
    status_code = 400


class ValidationError(PlannerError):
    """Malformed request payload."""


class TaskValidationError(ValidationError):
    """Task write that would break a scheduling rule."""


class NotFoundError(PlannerError):
    status_code = 404


class PremiumRequiredError(PlannerError):
    status_code = 403


class SignatureError(PlannerError):
    """Webhook payload whose provider signature does not verify."""
