"""Pattern suggestion endpoint."""

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_service, require_api_key
from backend.app.schemas.envelope import Envelope, error_responses
from backend.app.schemas.group import SuggestionListData
from backend.app.services.channel_grouper import ChannelGrouperService

router = APIRouter(
    prefix="/suggestions",
    tags=["suggestions"],
    dependencies=[Depends(require_api_key)],
    responses=error_responses(401, 500),
)


@router.get("", response_model=Envelope[SuggestionListData])
async def get_suggestions(service: ChannelGrouperService = Depends(get_service)) -> dict:
    return {"success": True, "data": SuggestionListData(suggestions=service.get_suggestions())}
