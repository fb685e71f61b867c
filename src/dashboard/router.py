# src/dashboard/router.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from src.auth.schemas import SessionClaims
from src.core.dependencies import COORDINATOR_ROLES, get_current_claims, get_db, require_roles
from src.core.rate_limit import api_limit
from . import schemas
from .service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"],
)

coord_router = APIRouter(
    prefix="/api/coord",
    tags=["Coordinator"],
)


@router.get("/alumno", response_model=schemas.StudentSummary, summary="Student progress summary")
@api_limit
def student_dashboard(request: Request, claims: SessionClaims = Depends(get_current_claims), db: Session = Depends(get_db)):
    return DashboardService(db).student_summary(claims.email)


@router.get("/profesor", response_model=List[schemas.TeacherCourseSummary], summary="Per-course progress")
@api_limit
def teacher_dashboard(request: Request, claims: SessionClaims = Depends(get_current_claims), db: Session = Depends(get_db)):
    """Aggregates over every course in the store, not only the caller's."""
    logger.info(f"Teacher summary requested by {claims.email}")
    return DashboardService(db).teacher_summary()


@coord_router.get("/metrics", response_model=schemas.CoordinatorMetrics, summary="Global counts")
@api_limit
def coordinator_metrics(
    request: Request,
    claims: SessionClaims = Depends(require_roles(*COORDINATOR_ROLES)), db: Session = Depends(get_db)
):
    return DashboardService(db).coordinator_metrics()
