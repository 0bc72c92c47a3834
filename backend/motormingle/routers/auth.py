from fastapi import APIRouter

from ..schemas.auth import TokenRequest, TokenResponse
from ..services.access import issue_token

router = APIRouter()


@router.post("/jwt", response_model=TokenResponse)
async def create_token(payload: TokenRequest):
    return TokenResponse(token=issue_token(payload.model_dump(mode="json")))
