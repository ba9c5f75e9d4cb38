"""
LLM package exposing a provider-agnostic facade.

Backed by OpenAI today; model specs may carry a ``provider/`` prefix.
"""

from .base import ChatMessage, ChatMessages, LLMClient
from .provider import _get_llm, chat_completion, image_generate, tts_speech_stream

__all__ = [
    "ChatMessage",
    "ChatMessages",
    "LLMClient",
    "_get_llm",
    "chat_completion",
    "image_generate",
    "tts_speech_stream",
]
