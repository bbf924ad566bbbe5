"""
API Router

Every route under /api requires a bearer session token; the guard runs before
any handler.
"""

from fastapi import APIRouter, Depends

from app.core.auth import require_bearer
from orgpass_shared.schemas.common import GuardErrorResponse, ValidationErrorResponse

from . import organisations, users

router = APIRouter(
    dependencies=[Depends(require_bearer)],
    responses={
        401: {"model": GuardErrorResponse},
        422: {"model": ValidationErrorResponse},
    },
)

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(organisations.router, prefix="/organisations", tags=["Organisations"])
