from typing import Any, Dict

from fastapi import APIRouter, Depends

from authgate.auth.dependencies import get_current_user
from authgate.models.auth import ErrorResponse, ProtectedResponse

router = APIRouter()


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"model": ErrorResponse}},
)
async def protected(user: Dict[str, Any] = Depends(get_current_user)):
    """Example protected route. Requires Authorization: Bearer <token>."""
    return ProtectedResponse(message="This is protected data", user=user)
