"""Data models for the reasoning tool."""
from .thought import ThoughtData, REQUIRED_FIELDS
from .responses import (
    AbortedResponse,
    ChainSnapshot,
    ChainSummary,
    FailedResponse,
    ProcessedResponse,
    TextContent,
    ThoughtResponse,
    ToolResult,
)
from .rpc import JsonRpcRequest, rpc_error, rpc_result

__all__ = [
    "ThoughtData",
    "REQUIRED_FIELDS",
    "AbortedResponse",
    "ChainSnapshot",
    "ChainSummary",
    "FailedResponse",
    "ProcessedResponse",
    "TextContent",
    "ThoughtResponse",
    "ToolResult",
    "JsonRpcRequest",
    "rpc_error",
    "rpc_result",
]
