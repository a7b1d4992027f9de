from __future__ import annotations

import json

import pytest

from core.errors import ProviderError
from services.analysis import fallback_actions, fallback_insights, run_analysis
from services.anomalies import detect_feature_anomalies

COMPLIANT_REPLY = json.dumps(
    {
        "semantic_context": "Revenue jumped on the last day, driven by the north promo.",
        "key_highlights": ["Revenue 10x above baseline"],
        "drivers": [{"name": "promo", "direction": "positive", "impact_score": 0.8, "explanation": "launch"}],
        "insights": [
            {
                "title": "Revenue spike",
                "description": "Last-day revenue far above history",
                "category": "performance",
                "priority": "high",
                "confidence": 0.85,
                "related_metrics": ["sales.revenue"],
            }
        ],
        "actions": [
            {"label": "Confirm promo", "description": "Check with marketing", "action_type": "notification", "urgency": "medium"}
        ],
    }
)


def _fail_if_called():
    raise AssertionError("generator must not be resolved when the LLM is disabled")


def _outlier_features() -> dict:
    features = {f"f{i}": 10 for i in range(9)}
    features["churn"] = 1000
    return features


def test_disabled_llm_uses_statistics_only(make_request, spiking_table) -> None:
    request = make_request(
        fsb_features={"features": _outlier_features()},
        analytic_data={"tables": [spiking_table]},
        constraints={"disable_llm": True},
    )
    response = run_analysis(request, _fail_if_called)

    assert response.semantic_context == "Analysis completed. 2 anomaly(ies) detected. 0 correlation(s) identified."
    assert response.meta.llm_model_used is None
    assert response.meta.llm_tokens_input == 0
    assert len(response.insights) == 2
    assert {i.title for i in response.insights} == {"Anomaly detected in churn", "Anomaly detected in sales.revenue"}
    assert all(a.action_type == "alert_escalation" for a in response.actions)
    assert response.statistics is not None and "sales.revenue" in response.statistics


def test_disabled_llm_with_nothing_to_report(make_request) -> None:
    response = run_analysis(make_request(constraints={"disable_llm": True}, language="pt-BR"), _fail_if_called)
    assert response.semantic_context.startswith("Análise concluída. 0 anomalia(s)")
    assert response.insights == []
    assert response.actions == []
    assert response.statistics is None


def test_fallback_respects_max_insights(make_request) -> None:
    request = make_request(
        fsb_features={"features": _outlier_features()},
        constraints={"disable_llm": True, "max_insights": 0},
    )
    assert run_analysis(request, _fail_if_called).insights == []


def test_fallback_orders_by_severity() -> None:
    features = {f"f{i}": 10 for i in range(30)}
    features["big"] = 5000
    features["bigger"] = 9000
    anomalies = detect_feature_anomalies(features)
    insights = fallback_insights(anomalies)
    assert [i.related_metrics for i in insights] == [["bigger"], ["big"]]
    actions = fallback_actions(anomalies)
    assert actions[0].label == "Investigate bigger"
    assert actions[0].urgency in ("immediate", "high")


def test_model_reply_without_json_becomes_context(make_request, fake_generator) -> None:
    generator = fake_generator("Revenue is stable; nothing unusual.")
    response = run_analysis(make_request(), lambda: generator)

    assert response.semantic_context == "Revenue is stable; nothing unusual."
    assert response.insights == []
    assert response.actions == []
    assert response.meta.llm_model_used == "fake-model"
    assert response.meta.llm_tokens_input == 120
    assert response.meta.llm_tokens_output == 45


def test_compliant_reply_fills_narrative(make_request, fake_generator, spiking_table) -> None:
    generator = fake_generator(f"Here you go:\n{COMPLIANT_REPLY}")
    response = run_analysis(make_request(analytic_data={"tables": [spiking_table]}), lambda: generator)

    assert response.semantic_context.startswith("Revenue jumped")
    assert response.key_highlights == ["Revenue 10x above baseline"]
    assert response.drivers[0].name == "promo"
    assert response.insights[0].id.startswith("insight-")
    assert response.actions[0].action_type == "notification"
    assert [a.metric for a in response.anomalies] == ["sales.revenue"]
    assert response.meta.warnings == []


def test_model_call_options(make_request, fake_generator) -> None:
    generator = fake_generator("{}")
    run_analysis(make_request(mode="root_cause", constraints={"max_tokens": 300}), lambda: generator)
    [call] = generator.calls
    assert call["max_tokens"] == 300
    assert call["temperature"] == 0.7
    assert "Identify root causes" in call["system_prompt"]
    assert "## INSTRUCTION" in call["prompt"]


def test_default_max_tokens(make_request, fake_generator) -> None:
    generator = fake_generator("{}")
    run_analysis(make_request(), lambda: generator)
    assert generator.calls[0]["max_tokens"] == 800


def test_invalid_items_surface_as_warnings(make_request, fake_generator) -> None:
    reply = json.dumps({"semantic_context": "ok", "insights": [{"title": "missing fields"}]})
    response = run_analysis(make_request(), lambda: fake_generator(reply))
    assert response.insights == []
    assert len(response.meta.warnings) == 1


def test_provider_failure_propagates(make_request, fake_generator) -> None:
    generator = fake_generator(error=ProviderError("Gemini API error: quota"))
    with pytest.raises(ProviderError):
        run_analysis(make_request(), lambda: generator)


def test_trace_and_request_ids_are_echoed(make_request, fake_generator) -> None:
    request = make_request(trace={"trace_id": "trace-42"}, constraints={"disable_llm": True})
    response = run_analysis(request, _fail_if_called)
    assert response.request_id == "req-test-1"
    assert response.meta.trace_id == "trace-42"
    assert response.mode == "mixed"


def test_debug_block(make_request, fake_generator) -> None:
    features = {"a": 1, "b": 2}
    generator = fake_generator("plain text")
    response = run_analysis(
        make_request(fsb_features={"features": features}, return_options={"include_debug_info": True}),
        lambda: generator,
    )
    assert response.debug.raw_llm_output == "plain text"
    assert response.debug.feature_snapshot == features

    raw_only = run_analysis(
        make_request(return_options={"include_raw_llm_output": True}),
        lambda: fake_generator("plain text"),
    )
    assert raw_only.debug.raw_llm_output == "plain text"
    assert raw_only.debug.feature_snapshot is None

    assert run_analysis(make_request(), lambda: fake_generator("x")).debug is None
