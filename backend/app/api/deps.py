"""Shared FastAPI dependencies: the service instance and API key auth."""

import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader, APIKeyQuery
from loguru import logger

from backend.app.config import settings
from backend.app.services.channel_grouper import ChannelGrouperService

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
_api_key_query = APIKeyQuery(name="api_key", auto_error=False)


def get_service(request: Request) -> ChannelGrouperService:
    """The process-wide service, created in the app lifespan."""
    return request.app.state.grouper


async def require_api_key(
    request: Request,
    header_key: str | None = Security(_api_key_header),
    query_key: str | None = Security(_api_key_query),
) -> None:
    """Accept the pre-shared key from the X-API-Key header or ?api_key=."""
    expected = settings.api_secret_key
    if not expected:
        raise HTTPException(status_code=500, detail="API key not configured on server")

    supplied = header_key or query_key
    if not supplied or not secrets.compare_digest(supplied, expected):
        logger.warning("Rejected API request without valid key: {} {}", request.method, request.url.path)
        raise HTTPException(status_code=401, detail="Invalid or missing API key")

    logger.info("API Request: {} {}", request.method, request.url.path)
