"""Channel listing and regex grouping endpoints."""

from fastapi import APIRouter, Depends, Query

from backend.app.api.deps import get_service, require_api_key
from backend.app.models.group import DEFAULT_FLAGS
from backend.app.schemas.channel import ChannelListData, GroupChannelsData, GroupChannelsRequest
from backend.app.schemas.envelope import Envelope, error_responses
from backend.app.services.channel_grouper import ChannelGrouperService

router = APIRouter(
    prefix="/channels",
    tags=["channels"],
    dependencies=[Depends(require_api_key)],
    responses=error_responses(400, 401, 500, 502),
)


@router.get("", response_model=Envelope[ChannelListData], response_model_exclude_none=True)
async def list_channels(
    regex: str | None = Query(default=None, min_length=1, description="Only return matching channels"),
    flags: str = Query(default=DEFAULT_FLAGS, max_length=6),
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    """All channels in the workspace, or the matching subset when ``regex`` is given."""
    if regex is not None:
        result = await service.group_by_regex(regex, flags)
        return {
            "success": True,
            "data": ChannelListData(
                total_channels=result.total_channels,
                channels=result.channels,
                pattern=result.pattern,
                flags=result.flags,
                matched_channels=result.matched_channels,
            ),
        }

    channels = await service.fetch_all_channels()
    return {
        "success": True,
        "data": ChannelListData(total_channels=len(channels), channels=channels),
    }


@router.post("/group", response_model=Envelope[GroupChannelsData])
async def group_channels(
    data: GroupChannelsRequest,
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    result = await service.group_by_regex(data.pattern, data.flags)
    display = service.format_for_display(result, data.limit) if data.limit else None
    return {"success": True, "data": GroupChannelsData(**result.model_dump(), display=display)}
