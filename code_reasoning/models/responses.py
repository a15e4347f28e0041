"""Response payloads returned to the client."""
import json
from typing import Any, Dict, List, Literal, Union
from pydantic import BaseModel

from .thought import ThoughtData


class ChainSummary(BaseModel):
    """Counts describing the recorded chain."""
    thought_history_length: int
    branch_count: int
    revision_count: int


class ProcessedResponse(BaseModel):
    """The thought was accepted and recorded."""
    status: Literal["processed"] = "processed"
    thought_number: int
    total_thoughts: int
    next_thought_needed: bool
    branches: List[str]
    thought_history_length: int

    @property
    def is_error(self) -> bool:
        return False


class FailedResponse(BaseModel):
    """The thought was rejected; nothing was recorded."""
    status: Literal["failed"] = "failed"
    error: str
    reason: str
    guidance: str
    example: Dict[str, Any]

    @property
    def is_error(self) -> bool:
        return True


class AbortedResponse(BaseModel):
    """The thought number passed the configured cap."""
    status: Literal["aborted"] = "aborted"
    error: str
    reason: str
    guidance: str
    max_thoughts: int
    summary: ChainSummary

    @property
    def is_error(self) -> bool:
        return True


ThoughtResponse = Union[ProcessedResponse, FailedResponse, AbortedResponse]


class ChainSnapshot(BaseModel):
    """Read-only view of the chain state."""
    history: List[ThoughtData]
    branches: Dict[str, List[ThoughtData]]
    summary: ChainSummary


class TextContent(BaseModel):
    """MCP text content block."""
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """MCP ``tools/call`` result."""
    content: List[TextContent]
    isError: bool = False

    @classmethod
    def from_response(cls, response: ThoughtResponse) -> "ToolResult":
        """Wrap an engine response as pretty-printed JSON text."""
        text = json.dumps(response.model_dump(mode="json"), indent=2)
        return cls(content=[TextContent(text=text)], isError=response.is_error)
