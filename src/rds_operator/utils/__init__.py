"""Utility functions for the RDS Operator."""

from .cancellation import check_cancelled
from .conditions import Condition, Conditions
from .errors import sanitize_exception
from .events import emit_event
from .passwords import generate_password
from .secrets import get_secret_value

__all__ = [
    "Condition",
    "Conditions",
    "check_cancelled",
    "sanitize_exception",
    "emit_event",
    "generate_password",
    "get_secret_value",
]
