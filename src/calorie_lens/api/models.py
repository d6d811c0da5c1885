"""Pydantic models for the analysis HTTP API."""

from pydantic import BaseModel


class AnalyzeFoodRequest(BaseModel):
    """Body of an analysis request: a base64 data URL or a fetchable URL."""

    image: str | None = None


class AnalyzeFoodResponse(BaseModel):
    """Successful analysis response."""

    success: bool = True
    result: dict[str, object]


class ErrorResponse(BaseModel):
    """Error body shared by every failure status."""

    error: str
