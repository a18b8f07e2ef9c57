from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """``{"success": true, "data": ...}`` wrapper used by every REST endpoint."""

    success: bool = True
    data: T


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str


def error_responses(*status_codes: int) -> dict[int | str, dict]:
    """OpenAPI ``responses`` entries documenting the error envelope."""
    return {code: {"model": ErrorEnvelope} for code in status_codes}
