"""Tests for the OpenAI client helpers and the module-level facade."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from slidereel.configs.config import config
from slidereel.llm import provider
from slidereel.llm.openai_client import (
    OpenAILLMClient,
    _allowed_sizes_for_model,
    _normalize_openai_image_size,
)


@pytest.mark.parametrize(
    ("model", "requested", "expected"),
    [
        ("gpt-image-1", "1024x1536", "1024x1536"),
        ("gpt-image-1", "1080x1920", "1024x1536"),
        ("gpt-image-1", "1792x1024", "1536x1024"),
        ("gpt-image-1", "auto", "auto"),
        ("gpt-image-1", "900x900", "1024x1024"),
        ("dall-e-3", "1024x1536", "1024x1792"),
        ("dall-e-2", "1024x1536", "1024x1024"),
        ("custom-model", "2048x1024", "1024x1024"),
        ("gpt-image-1", "garbage", "1024x1024"),
    ],
)
def test_normalize_openai_image_size(model: str, requested: str, expected: str) -> None:
    assert _normalize_openai_image_size(model, requested) == expected


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        ("gpt-image-1", {"1024x1024", "1024x1536", "1536x1024", "auto"}),
        ("dall-e-3", {"1024x1024", "1024x1792", "1792x1024"}),
        ("dall-e-2", {"256x256", "512x512", "1024x1024"}),
        ("something-else", {"1024x1024"}),
    ],
)
def test_allowed_sizes_for_model(model: str, expected: set[str]) -> None:
    assert _allowed_sizes_for_model(model) == expected


@pytest.fixture
def openai_client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "openai_api_key", "sk-test")
    monkeypatch.setattr(config, "openai_base_url", None)
    with patch("slidereel.llm.openai_client.OpenAI") as sdk:
        client = OpenAILLMClient()
        yield client, sdk.return_value


class TestOpenAILLMClient:
    def test_requires_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "openai_api_key", None)
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            OpenAILLMClient()

    def test_chat_completion_passes_response_format(self, openai_client) -> None:
        client, sdk = openai_client
        sdk.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"slides": []}'))]
        )

        content = client.chat_completion(
            [{"role": "user", "content": "hi"}],
            "gpt-4o",
            response_format={"type": "json_object"},
        )

        assert content == '{"slides": []}'
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_image_generate_returns_data_uri(self, openai_client) -> None:
        client, sdk = openai_client
        sdk.images.generate.return_value = SimpleNamespace(
            data=[SimpleNamespace(b64_json="aGVsbG8=", url=None)]
        )

        result = client.image_generate("a fox", "gpt-image-1", size="1024x1536", quality="medium")

        assert result == ["data:image/png;base64,aGVsbG8="]
        kwargs = sdk.images.generate.call_args.kwargs
        assert kwargs["size"] == "1024x1536"
        assert kwargs["quality"] == "medium"

    def test_image_generate_skips_quality_for_dalle(self, openai_client) -> None:
        client, sdk = openai_client
        sdk.images.generate.return_value = SimpleNamespace(
            data=[SimpleNamespace(b64_json=None, url="https://img/x.png")]
        )

        assert client.image_generate("a fox", "dall-e-3", quality="medium") == [
            "https://img/x.png"
        ]
        assert "quality" not in sdk.images.generate.call_args.kwargs

    def test_single_attempt_by_default(self, openai_client) -> None:
        client, sdk = openai_client
        sdk.chat.completions.create.side_effect = RuntimeError("429")

        with pytest.raises(RuntimeError):
            client.chat_completion([{"role": "user", "content": "hi"}], "gpt-4o", retries=1)
        assert sdk.chat.completions.create.call_count == 1

    def test_retries_when_configured(self, openai_client) -> None:
        client, sdk = openai_client
        ok = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="ok"))])
        sdk.chat.completions.create.side_effect = [RuntimeError("429"), ok]

        with patch("slidereel.llm.openai_client.time.sleep") as sleep:
            content = client.chat_completion(
                [{"role": "user", "content": "hi"}], "gpt-4o", retries=2, backoff=0.1
            )

        assert content == "ok"
        sleep.assert_called_once_with(0.1)


class TestFacade:
    def test_provider_prefix_is_stripped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = MagicMock()
        fake.chat_completion.return_value = "done"
        monkeypatch.setitem(provider._llm_clients, "openai", fake)

        assert provider.chat_completion([], "openai/gpt-4o") == "done"
        assert fake.chat_completion.call_args.args[1] == "gpt-4o"

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unsupported provider"):
            provider.image_generate("x", "acme/painter")

    def test_empty_model_after_prefix(self) -> None:
        with pytest.raises(ValueError, match="Invalid model"):
            provider.chat_completion([], "openai/")
