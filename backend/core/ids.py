import time
import uuid


def generate_id(prefix: str | None = None) -> str:
    token = uuid.uuid4().hex[:12]
    return f"{prefix}-{token}" if prefix else token


def generate_request_id() -> str:
    return f"req-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
