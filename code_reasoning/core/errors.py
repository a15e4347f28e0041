"""Reason codes and exceptions raised while processing a thought."""
from enum import Enum
from typing import Optional


class ReasonCode(str, Enum):
    """Machine-readable cause of a rejected or aborted thought."""
    INVALID_PAYLOAD = "invalid_payload"
    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    INVALID_THOUGHT = "invalid_thought"
    THOUGHT_TOO_LONG = "thought_too_long"
    INVALID_THOUGHT_NUMBER = "invalid_thought_number"
    INVALID_TOTAL_THOUGHTS = "invalid_total_thoughts"
    REVISION_MISUSE = "revision_misuse"
    BRANCH_MISUSE = "branch_misuse"
    INVALID_REVISION_REFERENCE = "invalid_revision_reference"
    INVALID_BRANCH_REFERENCE = "invalid_branch_reference"
    DUPLICATE_THOUGHT_NUMBER = "duplicate_thought_number"
    LINE_ALREADY_TERMINATED = "line_already_terminated"
    MAX_THOUGHTS_EXCEEDED = "max_thoughts_exceeded"
    INTERNAL_ERROR = "internal_error"


class ReasoningError(Exception):
    """Base class for recoverable thought processing errors."""

    def __init__(self, reason: ReasonCode, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.field = field


class ThoughtValidationError(ReasoningError):
    """Shape or cross-field error in the submitted thought."""


class ChainReferenceError(ReasoningError):
    """The thought is well-formed but conflicts with the recorded chain."""
