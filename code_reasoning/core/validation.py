"""Schema validation for submitted thoughts."""
from typing import Any, Dict, Optional, Tuple
from pydantic import ValidationError
from code_reasoning.core.errors import ReasonCode, ThoughtValidationError
from code_reasoning.models.thought import ThoughtData

# Custom error types raised from ThoughtData validators
ERROR_TYPE_REASONS: Dict[str, ReasonCode] = {
    "missing": ReasonCode.MISSING_FIELD,
    "thought_empty": ReasonCode.INVALID_THOUGHT,
    "thought_too_long": ReasonCode.THOUGHT_TOO_LONG,
    "revision_misuse": ReasonCode.REVISION_MISUSE,
    "branch_misuse": ReasonCode.BRANCH_MISUSE,
}

# Fallback for built-in type/range errors, keyed by field
FIELD_REASONS: Dict[str, ReasonCode] = {
    "thought": ReasonCode.INVALID_THOUGHT,
    "thought_number": ReasonCode.INVALID_THOUGHT_NUMBER,
    "total_thoughts": ReasonCode.INVALID_TOTAL_THOUGHTS,
    "is_revision": ReasonCode.REVISION_MISUSE,
    "revises_thought": ReasonCode.REVISION_MISUSE,
    "branch_id": ReasonCode.BRANCH_MISUSE,
    "branch_from_thought": ReasonCode.BRANCH_MISUSE,
}


class ThoughtValidator:
    """Turn a raw payload into a ThoughtData or raise ThoughtValidationError."""

    def __init__(self, max_thought_length: int):
        self.max_thought_length = max_thought_length

    def validate(self, raw: Any) -> ThoughtData:
        """Validate ``raw`` without touching any chain state."""
        if not isinstance(raw, dict):
            raise ThoughtValidationError(
                ReasonCode.INVALID_PAYLOAD,
                f"Validation Error: expected a JSON object, got {type(raw).__name__}.",
            )
        try:
            return ThoughtData.model_validate(
                raw, context={"max_thought_length": self.max_thought_length}
            )
        except ValidationError as exc:
            reason, field = self._classify(exc)
            raise ThoughtValidationError(reason, self._describe(exc), field) from exc

    @staticmethod
    def _classify(exc: ValidationError) -> Tuple[ReasonCode, Optional[str]]:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else None
        reason = ERROR_TYPE_REASONS.get(first["type"])
        if reason is None:
            reason = FIELD_REASONS.get(field, ReasonCode.INVALID_FIELD)
        return reason, field

    @staticmethod
    def _describe(exc: ValidationError) -> str:
        parts = []
        for error in exc.errors():
            loc = ".".join(str(part) for part in error["loc"])
            parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
        return "Validation Error: " + ", ".join(parts)
