"""
Backend selection. Generators are cached per (provider, model) for the life of
the process; concurrent first use of one key builds a single instance.
"""
import logging
import threading
from typing import Callable

from core import config
from core.errors import ProviderNotConfiguredError, UnsupportedProviderError
from core.llm import GeminiGenerator, OpenAIGenerator, TextGenerator

logger = logging.getLogger(__name__)

GENERATORS: dict[str, Callable[[str | None], TextGenerator]] = {
    "gemini": GeminiGenerator,
    "openai": OpenAIGenerator,
}
PLANNED_PROVIDERS = ("llama",)


class ProviderCache:
    def __init__(self):
        self._instances: dict[tuple[str, str], TextGenerator] = {}
        self._locks: dict[tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: tuple[str, str]) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def get_or_create(self, key: tuple[str, str], factory: Callable[[], TextGenerator]) -> TextGenerator:
        instance = self._instances.get(key)
        if instance is not None:
            return instance
        with self._lock_for(key):
            instance = self._instances.get(key)
            if instance is None:
                instance = factory()
                self._instances[key] = instance
                logger.info("LLM provider created and cached: %s:%s", *key)
        return instance

    def clear(self) -> None:
        with self._locks_guard:
            self._instances.clear()
            self._locks.clear()
        logger.info("LLM provider cache cleared")

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._instances


provider_cache = ProviderCache()


def provider_enabled(provider: str) -> bool:
    if provider == "gemini":
        return bool(config.GEMINI_API_KEY)
    if provider == "openai":
        return bool(config.OPENAI_API_KEY)
    return False


def provider_status(provider: str) -> str:
    if provider not in GENERATORS:
        return "unavailable"
    return "available" if provider_enabled(provider) else "disabled"


def get_generator(
    provider: str | None = None,
    model: str | None = None,
    cache: ProviderCache | None = None,
) -> TextGenerator:
    """Resolve (provider, model) to a cached backend; fails fast when unusable."""
    provider = provider or config.DEFAULT_LLM_PROVIDER
    model = model or config.DEFAULT_LLM_MODEL
    cache = cache if cache is not None else provider_cache

    if provider in PLANNED_PROVIDERS:
        raise ProviderNotConfiguredError(f"Provider {provider!r} is not implemented yet")
    if provider not in GENERATORS:
        raise UnsupportedProviderError(f"Unknown LLM provider: {provider!r}")
    if not provider_enabled(provider):
        raise ProviderNotConfiguredError(
            f"Provider {provider!r} is not enabled; set {provider.upper()}_API_KEY"
        )

    return cache.get_or_create((provider, model), lambda: GENERATORS[provider](model))
