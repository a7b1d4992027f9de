from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from core import config, providers
from core.errors import ProviderNotConfiguredError, UnsupportedProviderError
from core.providers import ProviderCache, get_generator, provider_status


@pytest.fixture
def counting_factory(monkeypatch, fake_generator):
    """Replaces the gemini backend with a fake and counts constructions."""
    built = []

    def factory(model):
        time.sleep(0.01)
        generator = fake_generator(model_id=model)
        built.append(generator)
        return generator

    monkeypatch.setitem(providers.GENERATORS, "gemini", factory)
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test-key")
    return built


def test_same_key_returns_cached_instance(counting_factory) -> None:
    cache = ProviderCache()
    first = get_generator("gemini", "gemini-2.5-flash", cache=cache)
    second = get_generator("gemini", "gemini-2.5-flash", cache=cache)
    assert first is second
    assert len(counting_factory) == 1
    assert ("gemini", "gemini-2.5-flash") in cache


def test_different_models_get_different_instances(counting_factory) -> None:
    cache = ProviderCache()
    flash = get_generator("gemini", "gemini-2.5-flash", cache=cache)
    pro = get_generator("gemini", "gemini-2.5-pro", cache=cache)
    assert flash is not pro
    assert len(cache) == 2


def test_clear_forces_rebuild(counting_factory) -> None:
    cache = ProviderCache()
    first = get_generator("gemini", "gemini-2.5-flash", cache=cache)
    cache.clear()
    assert len(cache) == 0
    assert get_generator("gemini", "gemini-2.5-flash", cache=cache) is not first
    assert len(counting_factory) == 2


def test_concurrent_first_use_builds_once(counting_factory) -> None:
    cache = ProviderCache()
    barrier = threading.Barrier(8)

    def resolve(_):
        barrier.wait()
        return get_generator("gemini", "gemini-2.5-flash", cache=cache)

    with ThreadPoolExecutor(max_workers=8) as pool:
        instances = list(pool.map(resolve, range(8)))

    assert len(counting_factory) == 1
    assert all(instance is instances[0] for instance in instances)


def test_defaults_come_from_config(counting_factory, monkeypatch) -> None:
    monkeypatch.setattr(config, "DEFAULT_LLM_PROVIDER", "gemini")
    monkeypatch.setattr(config, "DEFAULT_LLM_MODEL", "gemini-1.5-pro")
    cache = ProviderCache()
    get_generator(cache=cache)
    assert ("gemini", "gemini-1.5-pro") in cache


def test_unusable_providers_fail_fast(monkeypatch) -> None:
    monkeypatch.setattr(config, "OPENAI_API_KEY", "")
    cache = ProviderCache()
    with pytest.raises(ProviderNotConfiguredError):
        get_generator("llama", cache=cache)
    with pytest.raises(UnsupportedProviderError):
        get_generator("mistral", cache=cache)
    with pytest.raises(ProviderNotConfiguredError):
        get_generator("openai", "gpt-4o", cache=cache)
    assert len(cache) == 0


def test_provider_status(monkeypatch) -> None:
    monkeypatch.setattr(config, "GEMINI_API_KEY", "key")
    monkeypatch.setattr(config, "OPENAI_API_KEY", "")
    assert provider_status("gemini") == "available"
    assert provider_status("openai") == "disabled"
    assert provider_status("llama") == "unavailable"
