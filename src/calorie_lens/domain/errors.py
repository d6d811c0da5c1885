"""Failure kinds raised by food image analysis."""


class AnalysisError(Exception):
    """Base class for analysis failures.

    Attributes:
        message: human-readable text suitable for direct display
        http_status: status code the HTTP layer answers with
    """

    http_status = 500
    default_message = "分析失败，请重试"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AnalysisError):
    """No usable image was supplied."""

    http_status = 400
    default_message = "请上传食物图片"


class RateLimitedError(AnalysisError):
    """The upstream model answered 429."""

    http_status = 429
    default_message = "请求过于频繁，请稍后再试"


class UpstreamError(AnalysisError):
    """The upstream call failed or returned no content."""

    default_message = "食物分析失败"


class ParseError(AnalysisError):
    """The model reply contained no decodable JSON object."""

    default_message = "分析结果格式错误"


class IncompleteResultError(AnalysisError):
    """The decoded object lacks a name or numeric calories."""

    default_message = "分析结果不完整"
