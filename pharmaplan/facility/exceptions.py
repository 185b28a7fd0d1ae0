"""
exceptions.py - Layout synthesis exceptions

Errors raised by the layout generation pipeline. Recoverable conditions
(room-size misses, rationale failures, degraded relationship lookups) are
logged and never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pharmaplan.facility.generator.relationships import RelationshipBatchReport

__all__ = [
    'LayoutGenerationError',
    'InvalidRequestError',
    'RequirementExtractionError',
    'RelationshipQueryError',
]


class LayoutGenerationError(Exception):
    """Base exception for layout generation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class InvalidRequestError(LayoutGenerationError):
    """Raised when a request names neither a description nor explicit rooms."""


class RequirementExtractionError(LayoutGenerationError):
    """Raised when room extraction from a description fails or finds no rooms."""


class RelationshipQueryError(LayoutGenerationError):
    """Raised when relationship lookups fail and degradation is disabled."""

    def __init__(
        self,
        message: str,
        report: "RelationshipBatchReport",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.report = report
