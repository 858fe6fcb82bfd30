"""MCP error classes for the contract knowledge server.

Every error carries the JSON-RPC code it is reported under, so the dispatch
layer can turn any of them into an error object without a lookup table.
"""

from pydantic import ValidationError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class KnowledgeServerError(Exception):
    """MCP protocol error."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(self.message)


class DocumentLoadError(KnowledgeServerError):
    """A knowledge document is missing, unreadable or not in the expected shape."""

    def __init__(self, document: str, message: str):
        self.document = document
        super().__init__(INTERNAL_ERROR, message)


class ToolValidationError(KnowledgeServerError):
    """Tool arguments failed schema validation."""

    def __init__(self, message: str):
        super().__init__(INTERNAL_ERROR, message)


class UnknownToolError(KnowledgeServerError):
    def __init__(self, name: object):
        self.name = name
        super().__init__(METHOD_NOT_FOUND, f"Unknown tool: {name}")


class UnknownMethodError(KnowledgeServerError):
    def __init__(self, method: object):
        self.method = method
        super().__init__(METHOD_NOT_FOUND, f"Unknown method: {method}")


class InvalidRequestError(KnowledgeServerError):
    def __init__(self, message: str = "Invalid Request"):
        super().__init__(INVALID_REQUEST, message)


class ParseError(KnowledgeServerError):
    def __init__(self, message: str = "Parse error"):
        super().__init__(PARSE_ERROR, message)


def format_validation_error(error: ValidationError) -> str:
    """Render a pydantic ValidationError as ``field: message; field: message``."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
