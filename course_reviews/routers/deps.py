"""Shared request dependencies and error translation for the routers."""

from __future__ import annotations

from fastapi import Header, HTTPException, status

from course_reviews.exceptions import (
    CreationError,
    NotFoundError,
    ReviewServiceError,
    ValidationError,
)

_ERROR_STATUS = {
    ValidationError: (status.HTTP_422_UNPROCESSABLE_CONTENT, "VALIDATION_ERROR"),
    NotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    CreationError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "CREATION_FAILED"),
}


async def current_user_id(
    x_user_id: str = Header(..., alias="X-User-ID"),
) -> str:
    """
    The authenticated caller's id. Authentication happens upstream; the
    service trusts this header.
    """
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing user ID",
            headers={"X-Error-Code": "MISSING_USER_ID"},
        )
    return user_id


def to_http_error(exc: ReviewServiceError) -> HTTPException:
    """Translate a domain error into the matching HTTPException."""
    http_status, code = _ERROR_STATUS.get(
        type(exc), (status.HTTP_500_INTERNAL_SERVER_ERROR, "REVIEW_SERVICE_ERROR")
    )
    return HTTPException(
        status_code=http_status,
        detail=str(exc),
        headers={"X-Error-Code": code},
    )
