from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None
    retryable: bool


class ErrorResponse(BaseModel):
    request_id: str | None = None
    error: ErrorDetail
