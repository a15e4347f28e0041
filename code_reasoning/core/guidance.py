"""Corrective examples for rejected thoughts."""
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel
from code_reasoning.config import ReasoningConfig
from code_reasoning.core.errors import ReasonCode


class GuidanceCategory(str, Enum):
    LENGTH = "length"
    BRANCH = "branch"
    REVISION = "revision"
    NUMBERING = "numbering"
    GENERIC = "generic"


CATEGORY_BY_REASON: Dict[ReasonCode, GuidanceCategory] = {
    ReasonCode.INVALID_THOUGHT: GuidanceCategory.LENGTH,
    ReasonCode.THOUGHT_TOO_LONG: GuidanceCategory.LENGTH,
    ReasonCode.BRANCH_MISUSE: GuidanceCategory.BRANCH,
    ReasonCode.INVALID_BRANCH_REFERENCE: GuidanceCategory.BRANCH,
    ReasonCode.REVISION_MISUSE: GuidanceCategory.REVISION,
    ReasonCode.INVALID_REVISION_REFERENCE: GuidanceCategory.REVISION,
    ReasonCode.INVALID_THOUGHT_NUMBER: GuidanceCategory.NUMBERING,
    ReasonCode.INVALID_TOTAL_THOUGHTS: GuidanceCategory.NUMBERING,
    ReasonCode.DUPLICATE_THOUGHT_NUMBER: GuidanceCategory.NUMBERING,
    ReasonCode.MAX_THOUGHTS_EXCEEDED: GuidanceCategory.NUMBERING,
}

EXAMPLES: Dict[GuidanceCategory, Dict[str, Any]] = {
    GuidanceCategory.BRANCH: {
        "thought": "Exploring alternative: Consider algorithm X.",
        "thought_number": 3,
        "total_thoughts": 7,
        "next_thought_needed": True,
        "branch_from_thought": 2,
        "branch_id": "alternative-algo-x",
    },
    GuidanceCategory.REVISION: {
        "thought": "Revisiting earlier point: Assumption Y was flawed.",
        "thought_number": 4,
        "total_thoughts": 6,
        "next_thought_needed": True,
        "is_revision": True,
        "revises_thought": 2,
    },
    GuidanceCategory.LENGTH: {
        "thought": "Breaking down the thought into smaller parts...",
        "thought_number": 2,
        "total_thoughts": 5,
        "next_thought_needed": True,
    },
    GuidanceCategory.NUMBERING: {
        "thought": "Continuing from the previous thought with the next number.",
        "thought_number": 3,
        "total_thoughts": 5,
        "next_thought_needed": True,
    },
    GuidanceCategory.GENERIC: {
        "thought": "Initial exploration of the problem.",
        "thought_number": 1,
        "total_thoughts": 5,
        "next_thought_needed": True,
    },
}


class Guidance(BaseModel):
    """One hint sentence and a valid example request."""
    category: GuidanceCategory
    hint: str
    example: Dict[str, Any]


class GuidanceGenerator:
    """Map a reason code to a hint and a corrected example."""

    def __init__(self, config: ReasoningConfig):
        self.config = config

    def example_for(self, reason: ReasonCode) -> Guidance:
        category = CATEGORY_BY_REASON.get(reason, GuidanceCategory.GENERIC)
        return Guidance(
            category=category,
            hint=self._hint(reason, category),
            example=dict(EXAMPLES[category]),
        )

    def _hint(self, reason: ReasonCode, category: GuidanceCategory) -> str:
        limit = self.config.max_thought_length
        if reason == ReasonCode.THOUGHT_TOO_LONG:
            return f"The thought is too long. Keep it under {limit} characters."
        if reason == ReasonCode.MAX_THOUGHTS_EXCEEDED:
            return f"The maximum thought limit ({self.config.max_thoughts}) was reached."
        if reason == ReasonCode.DUPLICATE_THOUGHT_NUMBER:
            return (
                "Each main-line thought needs its own thought_number; "
                "use is_revision with revises_thought to correct an earlier one."
            )
        if reason == ReasonCode.LINE_ALREADY_TERMINATED:
            return (
                "This line of reasoning is already concluded; start a branch "
                "or revise an earlier thought instead of concluding again."
            )
        if category == GuidanceCategory.LENGTH:
            return (
                f"The 'thought' field is empty or invalid. Must be a non-empty string "
                f"below {limit} characters."
            )
        if category == GuidanceCategory.BRANCH:
            return (
                'When branching, provide both "branch_from_thought" (number) and '
                '"branch_id" (string), and do not combine with revision (is_revision=true).'
            )
        if category == GuidanceCategory.REVISION:
            return (
                "When revising, set is_revision=true and provide revises_thought "
                "(positive number). Do not combine with branching."
            )
        if category == GuidanceCategory.NUMBERING:
            return "Ensure thought_number is a positive integer and increments correctly."
        return "Check the tool description and provided schema for correct usage."
