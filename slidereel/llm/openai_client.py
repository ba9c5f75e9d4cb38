"""
OpenAI LLM client implementation for the pluggable LLM interface.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar, cast

from loguru import logger
from openai import OpenAI

from slidereel.configs.config import config

from .base import ChatMessages, LLMClient

T = TypeVar("T")


class OpenAILLMClient(LLMClient):
    def __init__(self) -> None:
        api_key = config.openai_api_key
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required for OpenAI client")
        if config.openai_base_url:
            self._client = OpenAI(api_key=api_key, base_url=config.openai_base_url)
        else:
            self._client = OpenAI(api_key=api_key)

    def _call(
        self,
        fn: Callable[[float], T],
        retries: int | None,
        backoff: float | None,
        timeout: float | None,
    ) -> T:
        r = max(1, config.openai_retries if retries is None else retries)
        b = config.openai_backoff if backoff is None else backoff
        t = config.openai_timeout if timeout is None else timeout
        for attempt in range(r):
            try:
                return fn(t)
            except Exception:
                if attempt == r - 1:
                    raise
                time.sleep(b * (2**attempt))
        raise AssertionError("unreachable")

    def chat_completion(
        self,
        messages: ChatMessages,
        model: str,
        *,
        retries: int | None = None,
        backoff: float | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> str:
        cli = cast(Any, self._client)

        def _create(t: float) -> str:
            resp = cli.chat.completions.create(
                model=model, messages=list(messages), timeout=t, **kwargs
            )
            return (resp.choices[0].message.content or "") if resp.choices else ""

        return self._call(_create, retries, backoff, timeout)

    def image_generate(
        self,
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
        cli = cast(Any, self._client)
        size_to_use = _normalize_openai_image_size(model, size)
        if size_to_use != size:
            logger.debug(
                f"Adjusted OpenAI image size from {size} to {size_to_use} for model={model}"
            )
        extra: dict[str, Any] = {}
        if quality and "gpt-image" in model.lower():
            extra["quality"] = quality

        def _generate(t: float) -> list[str]:
            resp = cli.images.generate(
                model=model, prompt=prompt, size=size_to_use, n=n, timeout=t, **extra
            )
            result: list[str] = []
            for d in getattr(resp, "data", []) or []:
                b64 = getattr(d, "b64_json", None)
                if b64:
                    result.append(f"data:image/png;base64,{b64}")
                    continue
                url = getattr(d, "url", None)
                if url:
                    result.append(url)
            return result

        return self._call(_generate, retries, backoff, timeout)

    def tts_speech_stream(
        self,
        model: str,
        voice: str,
        input_text: str,
        *,
        retries: int | None = None,
        backoff: float | None = None,
        timeout: float | None = None,
    ) -> Iterable[bytes]:
        cli = cast(Any, self._client)

        def _speech(t: float) -> Iterable[bytes]:
            resp = cli.audio.speech.create(
                model=model, voice=voice, input=input_text, timeout=t
            )
            if hasattr(resp, "iter_bytes"):
                return cast(Iterable[bytes], resp.iter_bytes())
            payload = getattr(resp, "content", None)
            if isinstance(payload, bytes | bytearray):
                return iter([bytes(payload)])
            return iter([bytes(resp)])

        return self._call(_speech, retries, backoff, timeout)


_PORTRAIT_SIZES = ("1024x1536", "1024x1792")
_LANDSCAPE_SIZES = ("1536x1024", "1792x1024")


def _orientation(size: str) -> str | None:
    width, sep, height = size.partition("x")
    if not sep or not width.isdigit() or not height.isdigit():
        return None
    w, h = int(width), int(height)
    if not w or not h:
        return None
    if w / h <= 0.85:
        return "portrait"
    if w / h >= 1.2:
        return "landscape"
    return "square"


def _normalize_openai_image_size(model: str, size: str) -> str:
    """Map a requested size onto one the image model accepts, keeping orientation."""
    allowed = _allowed_sizes_for_model(model.lower())
    requested = (size or "").strip().lower()
    if requested in allowed:
        return requested

    orientation = _orientation(requested)
    if orientation == "portrait":
        preferred: tuple[str, ...] = (*_PORTRAIT_SIZES, "auto")
    elif orientation == "landscape":
        preferred = (*_LANDSCAPE_SIZES, "auto")
    else:
        preferred = ()
    for candidate in preferred:
        if candidate in allowed:
            return candidate

    return "1024x1024" if "1024x1024" in allowed else sorted(allowed)[0]


def _allowed_sizes_for_model(model: str) -> set[str]:
    if "gpt-image" in model:
        return {"1024x1024", "1024x1536", "1536x1024", "auto"}
    if "dall-e-3" in model:
        return {"1024x1024", "1024x1792", "1792x1024"}
    if "dall-e" in model:
        return {"256x256", "512x512", "1024x1024"}
    return {"1024x1024"}
