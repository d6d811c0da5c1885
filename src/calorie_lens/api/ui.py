"""Browser UI endpoints backed by per-session state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from calorie_lens.api.views import render_page
from calorie_lens.domain.errors import AnalysisError, InvalidInputError
from calorie_lens.services.analysis import to_data_url
from calorie_lens.services.session_state import (
    clear_preview,
    complete_analysis,
    delete_history,
    fail_analysis,
    select_history,
    show_error,
    start_analysis,
)
from calorie_lens.services.session_store import new_session_id

if TYPE_CHECKING:
    from calorie_lens.containers import AppContainer

SESSION_COOKIE = "calorie_lens_session"

router = APIRouter(tags=["ui"])
_logger = logging.getLogger(__name__)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Render the page for the caller's session."""
    container: AppContainer = request.app.state.container
    session_id = _session_id(request)
    state = container.session_store.get(session_id)
    response = HTMLResponse(render_page(state, container.settings.daily_calorie_goal))
    _set_session_cookie(response, session_id)
    return response


@router.post("/ui/analyze")
async def analyze_photo(
    request: Request, photo: UploadFile | None = File(default=None)
) -> RedirectResponse:
    """Analyze an uploaded photo and add the result to the session history."""
    container: AppContainer = request.app.state.container
    store = container.session_store
    session_id = _session_id(request)

    image_bytes = await photo.read() if photo is not None else b""
    content_type = (photo.content_type or "") if photo is not None else ""
    if not image_bytes or not content_type.startswith("image/"):
        store.set(
            session_id, show_error(store.get(session_id), InvalidInputError().message)
        )
        return _redirect_home(session_id)

    image = to_data_url(image_bytes)
    state, tag = start_analysis(store.get(session_id), image)
    store.set(session_id, state)
    try:
        estimate = await container.analysis_service.analyze(image)
    except AnalysisError as exc:
        store.set(session_id, fail_analysis(store.get(session_id), tag, exc.message))
    except Exception:
        _logger.exception("Food analysis error", extra={"session_id": session_id})
        store.set(
            session_id,
            fail_analysis(store.get(session_id), tag, AnalysisError().message),
        )
    else:
        store.set(
            session_id,
            complete_analysis(store.get(session_id), tag, estimate, image),
        )
    return _redirect_home(session_id)


@router.post("/ui/clear")
async def clear(request: Request) -> RedirectResponse:
    """Drop the current preview and result."""
    container: AppContainer = request.app.state.container
    session_id = _session_id(request)
    state = container.session_store.get(session_id)
    container.session_store.set(session_id, clear_preview(state))
    return _redirect_home(session_id)


@router.post("/ui/history/{entry_id}/select")
async def select_entry(entry_id: str, request: Request) -> RedirectResponse:
    """Show a past analysis."""
    container: AppContainer = request.app.state.container
    session_id = _session_id(request)
    state = container.session_store.get(session_id)
    container.session_store.set(session_id, select_history(state, entry_id))
    return _redirect_home(session_id)


@router.post("/ui/history/{entry_id}/delete")
async def delete_entry(entry_id: str, request: Request) -> RedirectResponse:
    """Remove a past analysis from the session history."""
    container: AppContainer = request.app.state.container
    session_id = _session_id(request)
    state = container.session_store.get(session_id)
    container.session_store.set(session_id, delete_history(state, entry_id))
    return _redirect_home(session_id)


def _session_id(request: Request) -> str:
    return request.cookies.get(SESSION_COOKIE) or new_session_id()


def _set_session_cookie(
    response: HTMLResponse | RedirectResponse, session_id: str
) -> None:
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")


def _redirect_home(session_id: str) -> RedirectResponse:
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    _set_session_cookie(response, session_id)
    return response
