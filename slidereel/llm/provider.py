"""
Module-level LLM facade used by the planner, image and speech services.

Model names may carry a ``provider/`` prefix (``openai/gpt-4o``); only the
OpenAI-compatible provider is wired in, pointed elsewhere via
``OPENAI_BASE_URL`` when needed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .base import ChatMessages, LLMClient
from .openai_client import OpenAILLMClient

_PROVIDERS: dict[str, type[LLMClient]] = {"openai": OpenAILLMClient}
_llm_clients: dict[str, LLMClient] = {}


def _get_llm(provider: str | None = None) -> LLMClient:
    name = (provider or "openai").lower()
    client = _llm_clients.get(name)
    if client is None:
        if name not in _PROVIDERS:
            raise ValueError(f"Unsupported provider: {name}")
        client = _llm_clients[name] = _PROVIDERS[name]()
    return client


def _split_model(model: str) -> tuple[LLMClient, str]:
    provider, sep, name = model.partition("/")
    if not sep:
        return _get_llm("openai"), provider
    if not name:
        raise ValueError(f"Invalid model specification '{model}'")
    return _get_llm(provider), name


def chat_completion(
    messages: ChatMessages,
    model: str,
    *,
    retries: int | None = None,
    backoff: float | None = None,
    timeout: float | None = None,
    **kwargs: Any,
) -> str:
    client, name = _split_model(model)
    return client.chat_completion(
        messages, name, retries=retries, backoff=backoff, timeout=timeout, **kwargs
    )


def image_generate(
    prompt: str,
    model: str,
    size: str = "1024x1536",
    n: int = 1,
    *,
    quality: str | None = None,
    retries: int | None = None,
    backoff: float | None = None,
    timeout: float | None = None,
) -> list[str]:
    client, name = _split_model(model)
    return client.image_generate(
        prompt,
        name,
        size=size,
        n=n,
        quality=quality,
        retries=retries,
        backoff=backoff,
        timeout=timeout,
    )


def tts_speech_stream(
    model: str,
    voice: str,
    input_text: str,
    *,
    retries: int | None = None,
    backoff: float | None = None,
    timeout: float | None = None,
) -> Iterable[bytes]:
    client, name = _split_model(model)
    voice_name = voice.rpartition("/")[2]
    return client.tts_speech_stream(
        name, voice_name, input_text, retries=retries, backoff=backoff, timeout=timeout
    )
