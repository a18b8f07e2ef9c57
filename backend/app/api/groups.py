"""Saved group endpoints, keyed by an opaque user ID."""

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_service, require_api_key
from backend.app.errors import GroupNotFound
from backend.app.schemas.channel import GroupChannelsData
from backend.app.schemas.envelope import Envelope, error_responses
from backend.app.schemas.group import GroupListData, MessageData, SavedGroupData, SaveGroupRequest
from backend.app.services.channel_grouper import ChannelGrouperService

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
    dependencies=[Depends(require_api_key)],
    responses=error_responses(400, 401, 404, 500, 501, 502),
)


@router.get("/{user_id}", response_model=Envelope[GroupListData])
async def list_groups(user_id: str, service: ChannelGrouperService = Depends(get_service)) -> dict:
    return {
        "success": True,
        "data": GroupListData(user_id=user_id, groups=service.list_groups(user_id)),
    }


@router.post("/{user_id}", response_model=Envelope[SavedGroupData])
async def save_group(
    user_id: str,
    data: SaveGroupRequest,
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    group = service.save_group(user_id, data.group_name, data.pattern, data.flags)
    return {
        "success": True,
        "data": SavedGroupData(
            message=f'Group "{group.name}" saved successfully',
            group_name=group.name,
            pattern=group.pattern,
            flags=group.flags,
        ),
    }


# Group names may contain "/", so they are matched as paths
@router.delete("/{user_id}/{group_name:path}", response_model=Envelope[MessageData])
async def delete_group(
    user_id: str,
    group_name: str,
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    if not service.delete_group(user_id, group_name):
        raise GroupNotFound(group_name)
    return {"success": True, "data": MessageData(message=f'Group "{group_name}" deleted successfully')}


@router.post("/{user_id}/{group_name:path}/apply", response_model=Envelope[GroupChannelsData])
async def apply_group(
    user_id: str,
    group_name: str,
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    result = await service.apply_group(user_id, group_name)
    return {"success": True, "data": GroupChannelsData(**result.model_dump())}
