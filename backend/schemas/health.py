from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    timestamp: str  # ISO string
    version: str
    uptime_seconds: int
    service: str
    environment: str


class ModelOut(BaseModel):
    name: str
    provider: str
    default: bool
    max_tokens: int
    context_window: int
    status: Literal["available", "disabled", "unavailable"]


class ModelsResponse(BaseModel):
    models: list[ModelOut]
    default_provider: str
    default_model: str
