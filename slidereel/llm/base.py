from __future__ import annotations

import abc
from collections.abc import Iterable, Sequence
from typing import Any, Literal, TypedDict

MessageRole = Literal["system", "user", "assistant"]


class ChatMessage(TypedDict):
    role: MessageRole
    content: str


ChatMessages = Sequence[ChatMessage]


class LLMClient(abc.ABC):
    """Blocking model client; callers run these methods in a worker thread."""

    @abc.abstractmethod
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
        """Return the assistant reply text, or an empty string when there is none."""

    @abc.abstractmethod
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
        """Return one reference per image: a ``data:`` URI or a download URL."""

    @abc.abstractmethod
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
        """Yield the encoded narration audio in chunks."""
