"""
Text-generation backends on top of LangChain chat models.

Every backend exposes generate(prompt, system_prompt, max_tokens, temperature,
stop_sequences) -> GenerationResult. Provider failures surface as
ProviderError / ProviderTimeoutError; nothing is retried here beyond the SDK's
own max_retries.
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from core import config
from core.errors import ProviderError, ProviderNotConfiguredError, ProviderTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelConfig:
    name: str
    provider: str
    max_tokens: int
    context_window: int
    temperature: float = 0.7
    top_p: float | None = None
    top_k: int | None = None


LLM_MODELS: dict[str, ModelConfig] = {
    "gemini-2.5-pro": ModelConfig("gemini-2.5-pro", "gemini", 8192, 1_000_000, 0.7, 0.95, 40),
    "gemini-2.5-flash": ModelConfig("gemini-2.5-flash", "gemini", 8192, 1_000_000, 0.7, 0.95, 40),
    "gemini-1.5-pro": ModelConfig("gemini-1.5-pro", "gemini", 8192, 1_000_000, 0.7, 0.95, 40),
    "gemini-1.5-flash": ModelConfig("gemini-1.5-flash", "gemini", 8192, 1_000_000, 0.7, 0.95, 40),
    "gpt-4o": ModelConfig("gpt-4o", "openai", 4096, 128_000, 0.7, 0.95),
    "gpt-4o-mini": ModelConfig("gpt-4o-mini", "openai", 4096, 128_000, 0.7, 0.95),
    "gpt-4-turbo": ModelConfig("gpt-4-turbo", "openai", 4096, 128_000, 0.7, 0.95),
}

DEFAULT_MODELS = {"gemini": "gemini-2.5-flash", "openai": "gpt-4o"}


@dataclass
class GenerationResult:
    text: str
    tokens_input: int
    tokens_output: int
    finish_reason: str
    model_id: str
    provider: str


class TextGenerator(Protocol):
    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop_sequences: list[str] | None = None,
    ) -> GenerationResult: ...

    def model_info(self) -> ModelConfig: ...


def resolve_model(model_name: str | None, provider: str) -> ModelConfig:
    """Catalog entry for model_name, or the provider's default when unknown or mismatched."""
    model = LLM_MODELS.get(model_name or "")
    if model is None or model.provider != provider:
        fallback = DEFAULT_MODELS[provider]
        logger.warning("Model %r is not a known %s model; using %s", model_name, provider, fallback)
        model = LLM_MODELS[fallback]
    return model


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


def message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _is_timeout(exc: Exception) -> bool:
    if isinstance(exc, TimeoutError) or "timeout" in type(exc).__name__.lower():
        return True
    message = str(exc).lower()
    return "timeout" in message or "timed out" in message


class ChatModelGenerator:
    """Adapts a LangChain chat model to the GenerationResult contract."""

    provider = "generic"
    label = "LLM"
    estimate_missing_usage = False
    default_finish_reason = "stop"

    def __init__(self, chat_model: BaseChatModel, model_config: ModelConfig):
        self.chat_model = chat_model
        self.model_config = model_config

    def model_info(self) -> ModelConfig:
        return self.model_config

    def _messages(self, prompt: str, system_prompt: str | None) -> list[BaseMessage]:
        messages: list[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))
        return messages

    def _invoke_kwargs(self, max_tokens: int | None, temperature: float | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature
        return kwargs

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop_sequences: list[str] | None = None,
    ) -> GenerationResult:
        started = time.perf_counter()
        messages = self._messages(prompt, system_prompt)
        try:
            message = self.chat_model.invoke(
                messages,
                stop=stop_sequences,
                **self._invoke_kwargs(max_tokens, temperature),
            )
        except Exception as exc:
            logger.error("%s call failed (model=%s): %s", self.label, self.model_config.name, exc)
            if _is_timeout(exc):
                raise ProviderTimeoutError(f"{self.label} API timeout: {exc}") from exc
            raise ProviderError(f"{self.label} API error: {exc}") from exc

        text = message_text(message)
        usage = getattr(message, "usage_metadata", None) or {}
        tokens_input = usage.get("input_tokens") or 0
        tokens_output = usage.get("output_tokens") or 0
        if self.estimate_missing_usage and not usage:
            tokens_input = estimate_tokens("".join(message_text(m) for m in messages))
            tokens_output = estimate_tokens(text)

        metadata = getattr(message, "response_metadata", None) or {}
        finish_reason = metadata.get("finish_reason") or self.default_finish_reason
        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "%s generate done: model=%s tokens_in=%d tokens_out=%d duration_ms=%d",
            self.label,
            self.model_config.name,
            tokens_input,
            tokens_output,
            duration_ms,
        )
        return GenerationResult(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            finish_reason=str(finish_reason),
            model_id=self.model_config.name,
            provider=self.provider,
        )


def _timeout_seconds() -> float:
    return config.ANALYSIS_TIMEOUT_MS / 1000.0


class OpenAIGenerator(ChatModelGenerator):
    provider = "openai"
    label = "OpenAI"

    def __init__(self, model_name: str | None = None, api_key: str | None = None):
        api_key = api_key or config.OPENAI_API_KEY
        if not api_key:
            raise ProviderNotConfiguredError("OPENAI_API_KEY is not configured")
        model_config = resolve_model(model_name, self.provider)
        chat_model = ChatOpenAI(
            model=model_config.name,
            temperature=model_config.temperature,
            top_p=model_config.top_p,
            max_tokens=model_config.max_tokens,
            timeout=_timeout_seconds(),
            max_retries=config.LLM_MAX_RETRIES,
            api_key=api_key,
        )
        super().__init__(chat_model, model_config)
        logger.info("OpenAIGenerator ready with model %s", model_config.name)


class GeminiGenerator(ChatModelGenerator):
    """Gemini gets the system prompt folded into the user turn."""

    provider = "gemini"
    label = "Gemini"
    estimate_missing_usage = True
    default_finish_reason = "STOP"

    def __init__(self, model_name: str | None = None, api_key: str | None = None):
        api_key = api_key or config.GEMINI_API_KEY
        if not api_key:
            raise ProviderNotConfiguredError("GEMINI_API_KEY is not configured")
        model_config = resolve_model(model_name, self.provider)
        chat_model = ChatGoogleGenerativeAI(
            model=model_config.name,
            temperature=model_config.temperature,
            top_p=model_config.top_p,
            top_k=model_config.top_k,
            max_output_tokens=model_config.max_tokens,
            timeout=_timeout_seconds(),
            max_retries=config.LLM_MAX_RETRIES,
            google_api_key=api_key,
        )
        super().__init__(chat_model, model_config)
        logger.info("GeminiGenerator ready with model %s", model_config.name)

    def _messages(self, prompt: str, system_prompt: str | None) -> list[BaseMessage]:
        full_prompt = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        return [HumanMessage(content=full_prompt)]

    def _invoke_kwargs(self, max_tokens: int | None, temperature: float | None) -> dict[str, Any]:
        generation_config: dict[str, Any] = {}
        if max_tokens is not None:
            generation_config["max_output_tokens"] = max_tokens
        if temperature is not None:
            generation_config["temperature"] = temperature
        return {"generation_config": generation_config} if generation_config else {}
