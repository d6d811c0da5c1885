"""OpenAI-compatible chat completions client for image analysis."""

import logging
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from calorie_lens.domain.errors import RateLimitedError, UpstreamError
from calorie_lens.services.analysis import ChatClient

_logger = logging.getLogger(__name__)


@dataclass
class OpenAIChatClient(ChatClient):
    """Chat client backed by the openai SDK pointed at any compatible endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, *, base_url: str, api_key: str, timeout_seconds: float
    ) -> "OpenAIChatClient":
        """Create a client that issues exactly one request per call."""
        return cls(
            client=AsyncOpenAI(
                base_url=base_url,
                api_key=api_key,
                timeout=timeout_seconds,
                max_retries=0,
            )
        )

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_url: str,
        temperature: float,
        max_tokens: int,
    ) -> str | None:
        """Call chat completions with a text part and an image part."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.RateLimitError as exc:
            _logger.warning("AI service rate limited: %s", exc.response.text)
            raise RateLimitedError from exc
        except openai.APIStatusError as exc:
            error_text = exc.response.text
            _logger.error("AI service error: %s %s", exc.status_code, error_text)
            raise UpstreamError(f"食物分析失败: {error_text}") from exc
        except openai.APIError as exc:
            _logger.error("AI service request failed: %s", exc)
            raise UpstreamError(f"食物分析失败: {exc}") from exc

        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
