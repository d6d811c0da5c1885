"""Food image analysis backed by a vision-capable chat model."""

import base64
import json
import logging
import math
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from calorie_lens.domain.errors import (
    IncompleteResultError,
    InvalidInputError,
    ParseError,
    UpstreamError,
)
from calorie_lens.domain.nutrition import NutritionEstimate

ANALYSIS_PROMPT = """你是一个专业的营养师和食物识别专家。请分析这张食物图片，并返回以下JSON格式的数据：

{
  "name": "食物名称（中文）",
  "calories": 卡路里数值（千卡，整数）,
  "protein": 蛋白质克数（数字，保留1位小数）,
  "carbs": 碳水化合物克数（数字，保留1位小数）,
  "fat": 脂肪克数（数字，保留1位小数）,
  "fiber": 膳食纤维克数（数字，保留1位小数）,
  "confidence": 识别置信度（0-1之间的小数）,
  "servingSize": "份量描述（如：一份约200g）"
}

要求：
1. 仔细观察图片中的食物
2. 根据食物的外观估算份量
3. 提供准确的营养成分数据
4. 如果图片中有多种食物，合并计算总营养值
5. 只返回JSON格式，不要其他文字"""

_logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite number {name} in model reply")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"number {literal} overflows a float")
    return value


_decoder = json.JSONDecoder(parse_float=_finite_float, parse_constant=_reject_constant)


class ChatClient(Protocol):
    """Interface for a multimodal chat-completion endpoint."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_url: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None:
        """Send one text+image user message and return the reply text."""


@dataclass
class FoodAnalysisService:
    """Turns one food image into one validated nutrition estimate."""

    client: ChatClient
    model: str
    temperature: float = 0.3
    max_tokens: int = 1000
    prompt: str = ANALYSIS_PROMPT

    async def analyze(self, image: object) -> NutritionEstimate:
        """Analyze an image given as a data URL or a fetchable URL."""
        if not isinstance(image, str) or not image.strip():
            raise InvalidInputError
        _logger.info("Analyzing food image")
        content = await self.client.complete(
            model=self.model,
            prompt=self.prompt,
            image_url=image,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not content:
            raise UpstreamError("未能获取分析结果")
        payload = extract_json_object(content)
        if payload is None:
            _logger.error("No JSON object in model reply: %r", content)
            raise ParseError
        estimate = parse_estimate(payload)
        _logger.info("Food analysis completed: %s", estimate.name)
        return estimate


def extract_json_object(text: str) -> dict[str, object] | None:
    """Return the first balanced JSON object embedded in free text.

    Each ``{`` is tried as the start of an object; braces in surrounding
    prose that do not begin valid JSON are skipped. ``NaN``,
    ``Infinity`` and floats that overflow never decode.
    """
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except ValueError:
            start = text.find("{", start + 1)
            continue
        return value
    return None


def parse_estimate(payload: dict[str, object]) -> NutritionEstimate:
    """Validate a decoded reply as a nutrition estimate."""
    try:
        return NutritionEstimate.model_validate(payload)
    except ValidationError as exc:
        _logger.error("Incomplete analysis result: %s", exc)
        raise IncompleteResultError from exc


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
