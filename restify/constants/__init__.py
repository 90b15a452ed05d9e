"""Constants package."""

from .status_codes import SUCCESS_CODES, APIStatus, get_success_status

__all__ = [
    "APIStatus",
    "SUCCESS_CODES",
    "get_success_status",
]
