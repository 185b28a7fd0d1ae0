"""
pharmaplan/llm/providers/base.py - Base Provider

Abstract base class for LLM providers with:
- Retry with exponential backoff
- Per-request timeout
- JSON response parsing and schema validation
- Session usage counters
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..protocol import LLMOptions, LLMResponse
from ..exceptions import (
    LLMError,
    TimeoutError as LLMTimeoutError,
    TransientError,
    ValidationError,
)

__all__ = ["BaseProvider", "extract_json_block"]

logger = logging.getLogger("llm.provider")


def extract_json_block(content: str) -> str:
    """Strip surrounding whitespace and a markdown code fence, if any."""
    content = content.strip()
    if content.startswith("```"):
        content = content.split("```")[1]
        if content.startswith("json"):
            content = content[4:]
        content = content.strip()
    return content


class BaseProvider(ABC):
    """
    Abstract base class for LLM providers.

    Implements retries, timeouts and JSON validation and delegates the
    actual API call to subclasses.
    """

    def __init__(
        self,
        model: str,
        max_tokens: int = 2048,
        temperature: float = 0.3,
        timeout_seconds: int = 60,
        retry_attempts: int = 2,
        retry_delay_ms: int = 1000,
    ):
        """
        Initialize the base provider.

        Args:
            model: Model identifier
            max_tokens: Default max completion tokens
            temperature: Default temperature
            timeout_seconds: Request timeout
            retry_attempts: Number of retry attempts
            retry_delay_ms: Delay before the first retry, doubled each time
        """
        self.model = model
        self.default_max_tokens = max_tokens
        self.default_temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts
        self.retry_delay_ms = retry_delay_ms

        self._stats: Dict[str, int] = {
            "total_requests": 0,
            "total_tokens": 0,
            "errors": 0,
        }

    @abstractmethod
    async def _raw_complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        options: LLMOptions,
    ) -> LLMResponse:
        """Make the actual API call. Implemented by subclasses."""
        ...

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        options: Optional[LLMOptions] = None,
    ) -> LLMResponse:
        """
        Generate a completion, retrying transient failures.

        Raises:
            LLMError: When every attempt failed
        """
        opts = (options or LLMOptions(timeout_seconds=self.timeout_seconds)).merge_with_defaults(
            self.default_max_tokens,
            self.default_temperature,
        )
        request_id = str(uuid.uuid4())[:8]
        last_error: Optional[Exception] = None
        start_time = time.monotonic()
        self._stats["total_requests"] += 1

        for attempt in range(self.retry_attempts + 1):
            try:
                response = await asyncio.wait_for(
                    self._raw_complete(prompt, system_prompt, opts),
                    timeout=opts.timeout_seconds,
                )
                response.latency_ms = int((time.monotonic() - start_time) * 1000)
                response.request_id = request_id
                self._stats["total_tokens"] += response.total_tokens
                return response

            except asyncio.TimeoutError:
                last_error = LLMTimeoutError(opts.timeout_seconds, request_id)
                logger.warning(f"Request timeout (attempt {attempt + 1})")

            except TransientError as e:
                last_error = e
                logger.warning(f"Transient error (attempt {attempt + 1}): {e}")

            except Exception as e:
                last_error = TransientError(str(e), e, request_id)
                logger.warning(f"Request error (attempt {attempt + 1}): {e}")

            if attempt < self.retry_attempts:
                delay = self.retry_delay_ms * (2 ** attempt) / 1000
                await asyncio.sleep(delay)

        self._stats["errors"] += 1
        raise LLMError(
            f"Request failed after {self.retry_attempts + 1} attempts: {last_error}",
            request_id=request_id,
        )

    async def complete_json(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_prompt: Optional[str] = None,
        options: Optional[LLMOptions] = None,
    ) -> BaseModel:
        """
        Generate JSON completion and validate against a Pydantic model.

        Raises:
            ValidationError: If the response doesn't match the schema
        """
        json_instruction = (
            f"You must respond with valid JSON matching this schema:\n"
            f"{json.dumps(response_model.model_json_schema())}\n"
            f"Only output the JSON object, no other text."
        )
        full_system = f"{system_prompt}\n\n{json_instruction}" if system_prompt else json_instruction

        response = await self.complete(prompt, full_system, options)

        try:
            data = json.loads(extract_json_block(response.content))
            return response_model.model_validate(data)

        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Response is not valid JSON: {e}",
                raw_response=response.content,
                request_id=response.request_id,
            ) from e
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response doesn't match schema: {e}",
                raw_response=response.content,
                request_id=response.request_id,
            ) from e

    def get_usage_stats(self) -> Dict[str, Any]:
        return {"model": self.model, **self._stats}
