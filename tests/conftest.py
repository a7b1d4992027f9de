from __future__ import annotations

from typing import Any

import pytest

from core.llm import GenerationResult, ModelConfig
from schemas.request import AnalyzeRequest


class FakeGenerator:
    """In-memory TextGenerator: returns a canned reply and records every call."""

    def __init__(self, text: str = "", *, error: Exception | None = None, model_id: str = "fake-model"):
        self.text = text
        self.error = error
        self.model_id = model_id
        self.calls: list[dict[str, Any]] = []

    def generate(self, prompt, system_prompt=None, max_tokens=None, temperature=None, stop_sequences=None):
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "stop_sequences": stop_sequences,
            }
        )
        if self.error is not None:
            raise self.error
        return GenerationResult(
            text=self.text,
            tokens_input=120,
            tokens_output=45,
            finish_reason="stop",
            model_id=self.model_id,
            provider="fake",
        )

    def model_info(self) -> ModelConfig:
        return ModelConfig(self.model_id, "fake", 1024, 8192)


@pytest.fixture
def fake_generator():
    return FakeGenerator


def _base_payload() -> dict[str, Any]:
    return {
        "request_id": "req-test-1",
        "tenant_id": "tenant-a",
        "use_case": "sales_monitoring",
        "mode": "mixed",
        "language": "en-US",
        "context": {"domain": "retail"},
        "prompt": "Explain what is driving revenue this week.",
    }


@pytest.fixture
def payload():
    """Factory for raw request dicts (what the HTTP layer receives)."""

    def build(**overrides: Any) -> dict[str, Any]:
        data = _base_payload()
        data.update(overrides)
        return data

    return build


@pytest.fixture
def make_request(payload):
    def build(**overrides: Any) -> AnalyzeRequest:
        return AnalyzeRequest.model_validate(payload(**overrides))

    return build


REVENUE_SERIES = [100, 101, 99, 100, 102, 98, 100, 101, 99, 100, 1000]


@pytest.fixture
def spiking_table() -> dict[str, Any]:
    """Sales table whose last revenue value spikes far above its history."""
    return {
        "name": "sales",
        "columns": [
            {"name": "day", "type": "date", "role": "TIMESTAMP"},
            {"name": "revenue", "type": "number", "role": "METRIC"},
            {"name": "region", "type": "string", "role": "DIMENSION"},
        ],
        "rows": [
            {"day": f"2026-01-{i + 1:02d}", "revenue": value, "region": "north"}
            for i, value in enumerate(REVENUE_SERIES)
        ],
    }


@pytest.fixture
def linear_table() -> dict[str, Any]:
    """Two METRIC columns with cost = 2 * units over ten rows."""
    return {
        "name": "ops",
        "columns": [
            {"name": "units", "type": "number", "role": "METRIC"},
            {"name": "cost", "type": "number", "role": "METRIC"},
        ],
        "rows": [{"units": x, "cost": 2 * x} for x in range(1, 11)],
    }
