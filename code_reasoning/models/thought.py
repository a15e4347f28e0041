"""Inbound thought record."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError


REQUIRED_FIELDS = ("thought", "thought_number", "total_thoughts", "next_thought_needed")


class ThoughtData(BaseModel):
    """A single reasoning step as submitted by the client.

    Field rules are strict: integers must be JSON integers (not booleans or
    floats) and flags must be JSON booleans. The maximum thought length is
    read from the validation context key ``max_thought_length``.
    """
    model_config = ConfigDict(extra="ignore")

    thought: str = Field(strict=True)
    thought_number: int = Field(strict=True, gt=0)
    total_thoughts: int = Field(strict=True, gt=0)
    next_thought_needed: bool = Field(strict=True)
    is_revision: Optional[bool] = Field(default=None, strict=True)
    revises_thought: Optional[int] = Field(default=None, strict=True, gt=0)
    branch_from_thought: Optional[int] = Field(default=None, strict=True, gt=0)
    branch_id: Optional[str] = Field(default=None, strict=True)
    needs_more_thoughts: Optional[bool] = Field(default=None, strict=True)

    @field_validator("thought")
    @classmethod
    def check_thought(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("thought_empty", "Thought cannot be empty.")
        max_length = (info.context or {}).get("max_thought_length")
        if max_length is not None and len(value) > max_length:
            raise PydanticCustomError(
                "thought_too_long",
                "Thought exceeds maximum length of {max_length} characters. "
                "Break it into multiple steps.",
                {"max_length": max_length},
            )
        return value

    @field_validator("branch_id")
    @classmethod
    def check_branch_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise PydanticCustomError("branch_misuse", "branch_id must be a non-empty string.")
        return value

    @model_validator(mode="after")
    def check_modes(self) -> "ThoughtData":
        """Revision and branch markers are mutually exclusive and come in pairs."""
        if self.is_revision:
            if self.revises_thought is None or self.is_branch:
                raise PydanticCustomError(
                    "revision_misuse",
                    "If is_revision is true, revises_thought (number) is required, "
                    "and branch_id/branch_from_thought must not be set.",
                )
        elif self.revises_thought is not None:
            raise PydanticCustomError(
                "revision_misuse",
                "Cannot set revises_thought if is_revision is not true.",
            )
        if self.branch_from_thought is not None and self.branch_id is None:
            raise PydanticCustomError(
                "branch_misuse",
                "If branching, both branch_id (string) and branch_from_thought (number) "
                "are required, and is_revision must not be true.",
            )
        return self

    @property
    def is_branch(self) -> bool:
        return self.branch_id is not None or self.branch_from_thought is not None
