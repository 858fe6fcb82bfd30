"""JSON-RPC dispatch shared by every RPC transport.

``dispatch_rpc`` takes a decoded envelope and returns the HTTP status and
response body to send. It never raises: every failure becomes a JSON-RPC
error object.
"""

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from duracube_mcp.errors import (
    INTERNAL_ERROR,
    InvalidRequestError,
    KnowledgeServerError,
    ParseError,
    ToolValidationError,
    UnknownMethodError,
)
from duracube_mcp.knowledge.store import KnowledgeStore
from duracube_mcp.tools.registry import TOOLS, ToolSpec, get_tool, list_tool_descriptors

JSONRPC_VERSION = "2.0"

# Error codes reported with a 400; any other error code is a 500.
CLIENT_ERROR_CODES = {-32700, -32600, -32601}


@dataclass(frozen=True)
class ServerInfo:
    name: str
    version: str
    protocol_version: str


@dataclass(frozen=True)
class RpcReply:
    status_code: int
    body: dict[str, Any]


def rpc_result(request_id: Any, result: dict[str, Any]) -> RpcReply:
    return RpcReply(200, {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result})


def rpc_error(request_id: Any, code: int, message: str) -> RpcReply:
    status_code = 400 if code in CLIENT_ERROR_CODES else 500
    return RpcReply(
        status_code,
        {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}},
    )


def _initialize(server_info: ServerInfo) -> dict[str, Any]:
    return {
        "protocolVersion": server_info.protocol_version,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": server_info.name, "version": server_info.version},
    }


def _call_tool(params: Any, store: KnowledgeStore, tools: dict[str, ToolSpec]) -> dict[str, Any]:
    if not isinstance(params, dict):
        raise ToolValidationError("tools/call params must be an object")

    tool = get_tool(params.get("name"), tools)
    logger.info(f"tools/call: {tool.name}")
    text = tool.call(params.get("arguments"), store)
    return {"content": [{"type": "text", "text": text}]}


def dispatch_rpc(
    message: Any,
    store: KnowledgeStore,
    server_info: ServerInfo,
    tools: dict[str, ToolSpec] = TOOLS,
) -> RpcReply:
    """Dispatch one decoded JSON-RPC envelope.

    Args:
        message: Decoded request body
        store: Knowledge store the tools read from
        server_info: Name, version and protocol version reported by initialize
        tools: Tools exposed through tools/list and tools/call

    Returns:
        RpcReply with the HTTP status code and JSON-RPC response body
    """
    if not isinstance(message, dict):
        error = InvalidRequestError()
        logger.warning(f"Rejected RPC envelope of type {type(message).__name__}")
        return rpc_error(None, error.code, error.message)

    request_id = message.get("id")
    method = message.get("method")
    logger.debug(f"RPC request: method={method}, id={request_id}")

    try:
        if method == "initialize":
            return rpc_result(request_id, _initialize(server_info))
        if method == "notifications/initialized":
            return rpc_result(request_id, {})
        if method == "tools/list":
            return rpc_result(request_id, {"tools": list_tool_descriptors(tools)})
        if method == "tools/call":
            return rpc_result(request_id, _call_tool(message.get("params"), store, tools))
        raise UnknownMethodError(method)
    except KnowledgeServerError as e:
        logger.warning(f"RPC {method} failed ({e.code}): {e.message}")
        return rpc_error(request_id, e.code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error handling RPC {method}: {e}")
        return rpc_error(request_id, INTERNAL_ERROR, str(e))


def dispatch_rpc_body(
    raw: bytes,
    store: KnowledgeStore,
    server_info: ServerInfo,
    tools: dict[str, ToolSpec] = TOOLS,
) -> RpcReply:
    """Decode a raw request body and dispatch it; undecodable bodies are -32700."""
    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        error = ParseError()
        logger.warning("Rejected RPC body that is not valid JSON")
        return rpc_error(None, error.code, error.message)

    return dispatch_rpc(message, store, server_info, tools)
