"""HTTP status code constants with semantic names."""

from enum import IntEnum


class APIStatus(IntEnum):
    """Semantic HTTP status codes for repository responses."""

    # Success
    SUCCESS = 200
    CREATED = 201
    NO_CONTENT = 204

    # Client errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    VALIDATION_ERROR = 422

    # Server errors
    INTERNAL_ERROR = 500


# Success status per generated route
SUCCESS_CODES = {
    "index": APIStatus.SUCCESS,
    "show": APIStatus.SUCCESS,
    "store": APIStatus.CREATED,
    "update": APIStatus.SUCCESS,
    "delete": APIStatus.NO_CONTENT,
    "action": APIStatus.SUCCESS,
}


def get_success_status(operation: str) -> int:
    """Get appropriate success status for a repository operation."""
    return SUCCESS_CODES.get(operation.lower(), APIStatus.SUCCESS)
