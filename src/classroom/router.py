# src/classroom/router.py

from fastapi import APIRouter, Depends, Request, status, Path, HTTPException
from typing import List
import logging
from googleapiclient.errors import HttpError

from . import schemas
from .service import ClassroomAdapter
from src.core.dependencies import get_classroom_adapter, get_current_user
from src.core.rate_limit import api_limit
from src.shared.types import FetchStatus
from src.users.models import User

router = APIRouter(
    prefix="/api/courses",
    tags=["Classroom"],
)
logger = logging.getLogger(__name__)


def handle_google_api_error(e: HttpError, user_email: str, action: str):
    """Преобразует HttpError от Google в FastAPI HTTPException."""
    error_details = e.content.decode('utf-8') if e.content else str(e)
    status_code = e.resp.status if hasattr(e, 'resp') else 500
    logger.error(f"Google API error during '{action}' for user {user_email}: {status_code} - {error_details}")

    if status_code in [401, 403]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access to Google Classroom denied. Please sign in again. (Reason: {e.reason})",
        )
    if status_code == 404:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="The requested Classroom resource was not found.")

    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Google Classroom API Error: {e.reason}")


@router.get(
    "",
    response_model=List[schemas.CourseResponse],
    summary="List the caller's active courses"
)
@api_limit
def get_courses(
    request: Request,
    current_user: User = Depends(get_current_user),
    adapter: ClassroomAdapter = Depends(get_classroom_adapter),
):
    """Live data from Google Classroom. Returns an empty list when the user has no usable Google credential."""
    logger.info(f"Request to list courses for user {current_user.email}")
    try:
        result = adapter.list_courses(current_user)
    except HttpError as e:
        handle_google_api_error(e, current_user.email, "list_courses")
    if result.status == FetchStatus.NO_CREDENTIAL:
        logger.info(f"No Google credential for {current_user.email}, returning empty course list")
    return result.items


@router.get(
    "/{course_id}/coursework",
    response_model=List[schemas.CourseworkResponse],
    summary="List coursework of a course"
)
@api_limit
def get_coursework(
    request: Request,
    course_id: str = Path(..., description="Google Classroom course id"),
    current_user: User = Depends(get_current_user),
    adapter: ClassroomAdapter = Depends(get_classroom_adapter),
):
    logger.info(f"Request to list coursework of {course_id} for user {current_user.email}")
    try:
        result = adapter.list_coursework(current_user, course_id)
    except HttpError as e:
        handle_google_api_error(e, current_user.email, f"list_coursework:{course_id}")
    if result.status == FetchStatus.NO_CREDENTIAL:
        logger.info(f"No Google credential for {current_user.email}, returning empty coursework list")
    return result.items
