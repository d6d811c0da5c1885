"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorie_lens.adapters.openai_chat_client import OpenAIChatClient
from calorie_lens.config import Settings
from calorie_lens.services.analysis import FoodAnalysisService
from calorie_lens.services.session_store import InMemorySessionStore, SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: FoodAnalysisService
    session_store: SessionStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client = OpenAIChatClient.create(
        base_url=resolved_settings.ai_base_url,
        api_key=resolved_settings.ai_api_key,
        timeout_seconds=resolved_settings.ai_timeout_seconds,
    )
    analysis_service = FoodAnalysisService(
        client=chat_client,
        model=resolved_settings.ai_model,
        temperature=resolved_settings.ai_temperature,
        max_tokens=resolved_settings.ai_max_tokens,
    )
    session_store = InMemorySessionStore(
        ttl_seconds=resolved_settings.session_ttl_seconds
    )

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        session_store=session_store,
        close_resources=close_resources,
    )
