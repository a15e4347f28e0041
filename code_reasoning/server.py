"""MCP server over line-delimited JSON-RPC on stdio.

One JSON-RPC message (or batch) per line on stdin; one response frame per
line on stdout. stdout is guarded for the lifetime of the loop so nothing but
frames can reach the client.
"""
import json
import sys
from typing import Any, Dict, Optional, TextIO
from pydantic import ValidationError
from code_reasoning.config import ServiceConfig
from code_reasoning.core import ReasoningEngine
from code_reasoning.models import (
    REQUIRED_FIELDS,
    JsonRpcRequest,
    TextContent,
    ToolResult,
    rpc_error,
    rpc_result,
)
from code_reasoning.models.rpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)
from code_reasoning.utils import ProtocolSafeStdout, get_logger

logger = get_logger(__name__)

PROTOCOL_VERSION = "2024-11-05"
MAX_LOG_LENGTH = 200

THOUGHT_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": list(REQUIRED_FIELDS),
    "properties": {
        "thought": {"type": "string", "minLength": 1},
        "thought_number": {"type": "integer", "minimum": 1},
        "total_thoughts": {"type": "integer", "minimum": 1},
        "next_thought_needed": {"type": "boolean"},
        "is_revision": {"type": "boolean"},
        "revises_thought": {"type": "integer", "minimum": 1},
        "branch_from_thought": {"type": "integer", "minimum": 1},
        "branch_id": {"type": "string", "minLength": 1},
        "needs_more_thoughts": {"type": "boolean"},
    },
    "additionalProperties": False,
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ThoughtDataInput",
}


def tool_definition(service: ServiceConfig) -> Dict[str, Any]:
    return {
        "name": service.tool_name,
        "description": service.description,
        "inputSchema": THOUGHT_INPUT_SCHEMA,
    }


def reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


def truncate(text: str, limit: int = MAX_LOG_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "... [truncated]"


class RpcDispatcher:
    """Route JSON-RPC messages to MCP handlers backed by one engine."""

    def __init__(self, engine: ReasoningEngine, service: ServiceConfig):
        self.engine = engine
        self.service = service
        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    def handle(self, message: Any) -> Optional[Any]:
        """Return the response for ``message``, or None when no reply is due."""
        if isinstance(message, list):
            if not message:
                return rpc_error(None, INVALID_REQUEST, "Invalid Request: empty batch")
            replies = [reply for reply in (self._handle_one(item) for item in message) if reply is not None]
            return replies or None
        return self._handle_one(message)

    def _handle_one(self, message: Any) -> Optional[Dict[str, Any]]:
        request_id = message.get("id") if isinstance(message, dict) else None
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError as exc:
            logger.warning("rpc_invalid_request", error=str(exc.errors()[0]["msg"]))
            return rpc_error(request_id, INVALID_REQUEST, "Invalid Request")

        logger.debug("rpc_request", method=request.method, id=request.id)
        handler = self._methods.get(request.method)
        if handler is None:
            if request.is_notification:
                logger.debug("rpc_notification", method=request.method)
                return None
            logger.warning("rpc_unknown_method", method=request.method)
            return rpc_error(request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}")

        try:
            result = handler(request.params)
        except ValueError as exc:
            return rpc_error(request.id, INVALID_PARAMS, str(exc))
        except Exception as exc:
            logger.exception("rpc_handler_failed", method=request.method, error=str(exc))
            return rpc_error(request.id, INTERNAL_ERROR, "Internal error")

        if request.is_notification:
            return None
        return rpc_result(request.id, result)

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client = params.get("clientInfo") or {}
        logger.info("client_initialize", client=client.get("name"), version=client.get("version"))
        return {
            "protocolVersion": params.get("protocolVersion") or PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.service.server_name, "version": self.service.version},
        }

    def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": [tool_definition(self.service)]}

    def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise ValueError("tools/call requires a tool name")
        if name != self.service.tool_name:
            message = f"Unknown tool requested: {name}"
            logger.error("unknown_tool", tool=name)
            text = json.dumps({"code": METHOD_NOT_FOUND, "message": message})
            return ToolResult(content=[TextContent(text=text)], isError=True).model_dump()

        arguments = params.get("arguments")
        if isinstance(arguments, dict) and isinstance(arguments.get("thought"), str):
            logger.debug("tool_call", thought=truncate(arguments["thought"]))
        response = self.engine.process(arguments)
        return ToolResult.from_response(response).model_dump()


class StdioServer:
    """Read JSON-RPC lines from ``stdin`` and answer on a guarded stdout."""

    def __init__(self, dispatcher: RpcDispatcher, stdin: Optional[TextIO] = None):
        self.dispatcher = dispatcher
        self.stdin = stdin if stdin is not None else sys.stdin

    def serve(self) -> None:
        """Run until stdin closes or the process is interrupted."""
        logger.info("stdio_server_starting", server=self.dispatcher.service.server_name)
        with ProtocolSafeStdout() as channel:
            try:
                for line in self.stdin:
                    self.handle_line(line, channel)
            except KeyboardInterrupt:
                logger.info("stdio_server_interrupted")
        logger.info("stdio_server_stopped", dropped_writes=channel.dropped)

    def handle_line(self, line: str, channel: TextIO) -> None:
        line = line.strip()
        if not line:
            return
        try:
            message = json.loads(line, parse_constant=reject_constant)
        except ValueError as exc:
            logger.warning("rpc_parse_error", error=str(exc), preview=truncate(line, 50))
            self.send(rpc_error(None, PARSE_ERROR, "Parse error"), channel)
            return
        reply = self.dispatcher.handle(message)
        if reply is not None:
            self.send(reply, channel)

    def send(self, reply: Any, channel: TextIO) -> None:
        """Encode ``reply`` as one line and write it in a single call."""
        try:
            frame = json.dumps(reply, allow_nan=False)
        except (TypeError, ValueError) as exc:
            logger.error("rpc_encode_failed", error=str(exc))
            request_id = reply.get("id") if isinstance(reply, dict) else None
            if isinstance(request_id, bool) or not isinstance(request_id, (int, str)):
                request_id = None
            frame = json.dumps(rpc_error(request_id, INTERNAL_ERROR, "Response encoding failed"))
        logger.debug("rpc_response", frame=truncate(frame))
        channel.write(frame + "\n")
        channel.flush()


def run_stdio(engine: ReasoningEngine, service: ServiceConfig) -> None:
    StdioServer(RpcDispatcher(engine, service)).serve()
