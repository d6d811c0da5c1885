"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from calorie_lens.api.models import (
    AnalyzeFoodRequest,
    AnalyzeFoodResponse,
    ErrorResponse,
)
from calorie_lens.api.ui import router as ui_router
from calorie_lens.app_logging import configure_logging
from calorie_lens.containers import AppContainer
from calorie_lens.domain.errors import AnalysisError, InvalidInputError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type"
    ),
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Max-Age": "86400",
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(ui_router)

    @app.middleware("http")
    async def add_cors_headers(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(
        request: Request, exc: AnalysisError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorResponse(error=exc.message).model_dump(),
            headers=CORS_HEADERS,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.options("/analyze-food")
    async def analyze_food_preflight() -> Response:
        """Answer CORS preflight requests from the browser."""
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.post("/analyze-food")
    async def analyze_food(request: Request) -> AnalyzeFoodResponse:
        """Estimate the nutrition of the food in one image."""
        state_container: AppContainer = request.app.state.container
        body = await _read_analyze_request(request)
        try:
            estimate = await state_container.analysis_service.analyze(body.image)
        except AnalysisError:
            raise
        except Exception as exc:
            logger.exception("Food analysis error")
            message = _format_unexpected_error(state_container, exc)
            raise AnalysisError(message) from exc
        return AnalyzeFoodResponse(result=estimate.to_payload())

    return app


async def _read_analyze_request(request: Request) -> AnalyzeFoodRequest:
    """Parse the JSON body, treating malformed input as a missing image."""
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidInputError("请求体必须是JSON格式") from exc
    try:
        return AnalyzeFoodRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError from exc


def _format_unexpected_error(state_container: AppContainer, exc: Exception) -> str:
    """Return a user-facing failure message with local debug info."""
    fallback = AnalysisError.default_message
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
