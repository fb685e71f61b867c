# src/users/router.py
from fastapi import APIRouter, Depends, Request

from src.auth.schemas import SessionClaims
from src.core.dependencies import get_current_claims
from src.core.rate_limit import api_limit
from . import schemas

router = APIRouter(
    prefix="/api/me",
    tags=["Users"],
)


@router.get("", response_model=schemas.MeResponse, summary="Current identity")
@api_limit
def get_me(request: Request, claims: SessionClaims = Depends(get_current_claims)):
    """Identity from the session token. Google tokens are deliberately not part of the response."""
    return schemas.MeResponse(email=claims.email, name=claims.name, role=claims.role)
