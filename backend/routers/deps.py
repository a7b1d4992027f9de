import logging
from typing import Callable

from fastapi import Header, HTTPException, Request

from core import config
from core.llm import TextGenerator
from core.providers import get_generator

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 10


def require_auth(request: Request, authorization: str | None = Header(None)) -> str:
    """Bearer token check. Token contents are not verified beyond a minimum length."""
    if not authorization or not authorization.startswith("Bearer "):
        logger.warning("Request without bearer token: %s %s", request.method, request.url.path)
        raise HTTPException(401, detail={"code": "UNAUTHORIZED", "message": "Authentication token not provided"})
    token = authorization[len("Bearer ") :]
    if len(token) < MIN_TOKEN_LENGTH:
        logger.warning("Invalid bearer token: %s", request.url.path)
        raise HTTPException(401, detail={"code": "INVALID_TOKEN", "message": "Invalid authentication token"})
    return token


def resolve_tenant(request: Request, x_tenant_id: str | None = Header(None)) -> str:
    if config.MULTI_TENANT_ENABLED and not x_tenant_id:
        logger.warning("Request without tenant id in multi-tenant mode: %s", request.url.path)
        raise HTTPException(400, detail={"code": "MISSING_TENANT_ID", "message": "X-Tenant-Id header is required"})
    return x_tenant_id or "default"


def get_generator_resolver() -> Callable[[], TextGenerator]:
    return get_generator
