import time
from datetime import datetime, timezone

from fastapi import APIRouter

from core import config
from schemas.health import HealthResponse

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=config.SERVICE_VERSION,
        uptime_seconds=int(time.monotonic() - _STARTED_AT),
        service=config.SERVICE_NAME,
        environment=config.ENVIRONMENT,
    )
