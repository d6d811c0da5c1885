"""Tests for settings loading."""

from calorie_lens.config import Settings


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.ai_base_url == "https://www.needware.dev/v1"
    assert settings.daily_calorie_goal == 2000


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("AI_MODEL", "openai/gpt-4o")
    monkeypatch.setenv("DAILY_CALORIE_GOAL", "1800")

    settings = Settings()

    assert settings.ai_model == "openai/gpt-4o"
    assert settings.daily_calorie_goal == 1800
