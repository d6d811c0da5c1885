"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import pytest

from calorie_lens.config import Settings
from calorie_lens.containers import AppContainer
from calorie_lens.services.analysis import ChatClient, FoodAnalysisService
from calorie_lens.services.session_store import InMemorySessionStore

RICE_REPLY = json.dumps(
    {
        "name": "米饭",
        "calories": 230,
        "protein": 4,
        "carbs": 50,
        "fat": 0.5,
        "fiber": 1,
        "confidence": 0.98,
        "servingSize": "一碗 (约200g)",
    },
    ensure_ascii=False,
)


@dataclass
class FakeChatClient(ChatClient):
    """Fake chat client returning a fixed reply and recording calls."""

    reply: str | None = RICE_REPLY
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_url: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_url": image_url,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(ai_api_key="test-key", environment="test")


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def container(settings: Settings, chat_client: FakeChatClient) -> AppContainer:
    analysis_service = FoodAnalysisService(
        client=chat_client,
        model=settings.ai_model,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        session_store=InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds),
        close_resources=close_resources,
    )
