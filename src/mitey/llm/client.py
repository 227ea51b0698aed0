"""LiteLLM-based chat model."""

import logging
import time
from typing import Any

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    BadGatewayError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from mitey.errors import ModelUnavailable

logger = logging.getLogger(__name__)


class LiteLLMChatModel:
    """Chat model reached through LiteLLM (Ollama, OpenAI, Anthropic, ...)."""

    def __init__(
        self,
        model: str,
        temperature: float = 0.0,
        api_base: str | None = None,
        max_tokens: int | None = None,
        num_ctx: int | None = None,
        repeat_penalty: float | None = None,
    ):
        """Initialize the chat model.

        Args:
            model: LiteLLM model string, e.g. ``ollama/qwen2.5-coder:7b``.
            temperature: Sampling temperature.
            api_base: Endpoint override, only sent for Ollama models.
            max_tokens: Optional response length cap.
            num_ctx: Context window in tokens, only sent for Ollama models.
            repeat_penalty: Repetition penalty, only sent for Ollama models.
        """
        self.model = model
        self.temperature = temperature
        self.api_base = api_base
        self.max_tokens = max_tokens
        self.num_ctx = num_ctx
        self.repeat_penalty = repeat_penalty

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send ``messages`` and return the reply text.

        Raises:
            ModelUnavailable: On connection, authentication, rate limit, server or API errors.
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        if self.model.startswith("ollama"):
            if self.api_base:
                kwargs["api_base"] = self.api_base
            if self.num_ctx is not None:
                kwargs["num_ctx"] = self.num_ctx
            if self.repeat_penalty is not None:
                kwargs["repeat_penalty"] = self.repeat_penalty

        start_time = time.perf_counter()
        try:
            response = await acompletion(**kwargs)
        except AuthenticationError as e:
            raise ModelUnavailable(f"Authentication failed: {e}") from e
        except RateLimitError as e:
            raise ModelUnavailable(f"Rate limit exceeded: {e}") from e
        except (APIConnectionError, ServiceUnavailableError, Timeout) as e:
            raise ModelUnavailable(f"Connection to {self.model} failed: {e}") from e
        except (InternalServerError, BadGatewayError) as e:
            raise ModelUnavailable(f"{self.model} failed on the server: {e}") from e
        except (APIError, BadRequestError, NotFoundError) as e:
            raise ModelUnavailable(f"LLM API error: {e}") from e

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(f"{self.model} replied in {duration_ms} ms")
        return str(response.choices[0].message.content or "")
