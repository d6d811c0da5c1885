"""Tests for the browser UI endpoints."""

import httpx
from fastapi.testclient import TestClient

from calorie_lens.api.app import create_app
from calorie_lens.api.ui import SESSION_COOKIE
from calorie_lens.domain.errors import RateLimitedError
from tests.conftest import FakeChatClient

PNG = b"\x89PNG\r\n\x1a\n" + b"pixels"


def _upload(
    client: TestClient, content: bytes = PNG, content_type: str = "image/png"
) -> httpx.Response:
    return client.post(
        "/ui/analyze", files={"photo": ("meal.png", content, content_type)}
    )


def test_index_sets_session_cookie(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/")

    assert response.status_code == 200
    assert "AI 卡路里" in response.text
    assert SESSION_COOKIE in response.cookies


def test_upload_adds_result_to_history(container, chat_client: FakeChatClient) -> None:
    client = TestClient(create_app(container))
    client.get("/")

    response = _upload(client)

    assert response.status_code == 200
    assert "米饭" in response.text
    assert "今日记录" in response.text
    assert chat_client.calls[0]["image_url"].startswith("data:image/png;base64,")
    session_id = client.cookies[SESSION_COOKIE]
    state = container.session_store.get(session_id)
    assert len(state.history) == 1
    assert not state.is_analyzing


def test_failed_analysis_shows_error_and_keeps_history(
    container, chat_client: FakeChatClient
) -> None:
    client = TestClient(create_app(container))
    _upload(client)
    chat_client.error = RateLimitedError()

    response = _upload(client)

    assert "请求过于频繁，请稍后再试" in response.text
    state = container.session_store.get(client.cookies[SESSION_COOKIE])
    assert len(state.history) == 1
    assert state.error == "请求过于频繁，请稍后再试"


def test_unexpected_failure_shows_generic_error(
    container, chat_client: FakeChatClient
) -> None:
    client = TestClient(create_app(container))
    chat_client.error = RuntimeError("boom")

    response = _upload(client)

    assert "分析失败，请重试" in response.text


def test_non_image_upload_is_rejected(container, chat_client: FakeChatClient) -> None:
    client = TestClient(create_app(container))

    response = _upload(client, content=b"hello", content_type="text/plain")

    assert "请上传食物图片" in response.text
    assert chat_client.calls == []


def test_delete_and_select_history(container) -> None:
    client = TestClient(create_app(container))
    _upload(client)
    session_id = client.cookies[SESSION_COOKIE]
    entry_id = container.session_store.get(session_id).history[0].id

    client.post("/ui/clear")
    assert container.session_store.get(session_id).analysis is None

    client.post(f"/ui/history/{entry_id}/select")
    assert container.session_store.get(session_id).analysis is not None

    response = client.post(f"/ui/history/{entry_id}/delete")
    assert response.status_code == 200
    assert container.session_store.get(session_id).history == ()


def test_sessions_are_isolated(container) -> None:
    first = TestClient(create_app(container))
    second = TestClient(create_app(container))
    _upload(first)

    response = second.get("/")

    assert "今日记录" not in response.text
