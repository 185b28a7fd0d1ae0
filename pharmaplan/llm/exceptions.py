"""
pharmaplan/llm/exceptions.py - LLM-specific exceptions

Exceptions raised by the text-generation layer. The layout assistant
catches them and either falls back to rule-based behaviour or lets the
layout engine wrap them.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "LLMError",
    "ProviderUnavailableError",
    "ValidationError",
    "TimeoutError",
    "TransientError",
]


class LLMError(Exception):
    """Base exception for LLM operations."""

    def __init__(
        self,
        message: str,
        recoverable: bool = False,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [self.message]
        if self.request_id:
            parts.append(f"[request_id={self.request_id}]")
        return " ".join(parts)


class ProviderUnavailableError(LLMError):
    """Raised when the LLM provider cannot be reached or initialized."""

    def __init__(
        self,
        provider: str,
        message: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        msg = message or f"LLM provider '{provider}' is unavailable"
        super().__init__(msg, recoverable=True, request_id=request_id)
        self.provider = provider


class ValidationError(LLMError):
    """Raised when a response is not JSON or does not match its schema."""

    def __init__(
        self,
        message: str = "Response validation failed",
        raw_response: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message, recoverable=False, request_id=request_id)
        self.raw_response = raw_response


class TimeoutError(LLMError):
    """Raised when a request times out."""

    def __init__(
        self,
        timeout_seconds: float,
        request_id: Optional[str] = None,
    ):
        message = f"Request timed out after {timeout_seconds}s"
        super().__init__(message, recoverable=True, request_id=request_id)
        self.timeout_seconds = timeout_seconds


class TransientError(LLMError):
    """Raised for errors that may succeed on retry."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message, recoverable=True, request_id=request_id)
        self.original_error = original_error
