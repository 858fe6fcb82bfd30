"""DuraCube Contract MCP Server - HTTP transport.

Endpoints:
- GET  /health                                  health check
- GET  /tools                                   tool descriptors
- GET  /sse                                     SSE endpoint for MCP clients
- POST /messages?sessionId=...                  JSON-RPC messages (SSE clients)
- POST /mcp                                     JSON-RPC (legacy)
- POST /tools/get_duracube_principles           direct tool call
- POST /tools/get_learned_corrections           direct tool call
- GET  /tools/get_output_format                 direct tool call
- POST /tools/get_finance_extraction_guide      direct tool call
- POST /tools/get_section_principle_mapping     direct tool call
"""

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse
from loguru import logger

from duracube_mcp.config.settings import Settings, settings
from duracube_mcp.errors import DocumentLoadError, KnowledgeServerError
from duracube_mcp.knowledge.store import KnowledgeStore, get_knowledge_store
from duracube_mcp.server.dispatch import ServerInfo, dispatch_rpc_body
from duracube_mcp.server.sse import new_session_id, sse_event_stream
from duracube_mcp.tools.registry import TOOLS, get_tool, list_tool_descriptors

router = APIRouter()


def create_error_response(status_code: int, error_message: str) -> JSONResponse:
    """Create the error body used by the direct tool endpoints."""
    return JSONResponse(status_code=status_code, content={"error": error_message})


async def _handle_rpc(request: Request) -> JSONResponse:
    raw = await request.body()
    reply = await asyncio.to_thread(
        dispatch_rpc_body,
        raw,
        request.app.state.store,
        request.app.state.server_info,
    )
    return JSONResponse(status_code=reply.status_code, content=reply.body)


async def _call_tool_directly(request: Request, tool_name: str, arguments: Any = None) -> Response:
    """Run a tool outside the JSON-RPC envelope and return its JSON text as-is."""
    tool = get_tool(tool_name)
    try:
        result = await asyncio.to_thread(tool.call, arguments, request.app.state.store)
        return Response(content=result, media_type="application/json")
    except KnowledgeServerError as e:
        logger.warning(f"Direct call to {tool_name} failed: {e.message}")
        return create_error_response(500, e.message)
    except Exception as e:
        logger.exception(f"Direct call to {tool_name} failed: {e}")
        return create_error_response(500, str(e))


async def _read_json_arguments(request: Request) -> tuple[Any, JSONResponse | None]:
    """Read the request body as tool arguments; an empty body means no arguments."""
    raw = await request.body()
    if not raw.strip():
        return None, None
    try:
        return json.loads(raw), None
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Invalid JSON body on {request.url.path}")
        return None, create_error_response(400, "Invalid JSON in request body")


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    server_info: ServerInfo = request.app.state.server_info
    return {
        "status": "healthy",
        "server": server_info.name,
        "version": server_info.version,
        "tools": list(TOOLS),
        "documents_loaded": request.app.state.store.loaded_documents(),
    }


@router.get("/tools")
async def list_tools() -> dict[str, Any]:
    return {"tools": list_tool_descriptors()}


@router.get("/sse")
async def sse(request: Request) -> StreamingResponse:
    """Open an SSE stream announcing the /messages endpoint for this session."""
    app_settings: Settings = request.app.state.settings
    return StreamingResponse(
        sse_event_stream(new_session_id(), app_settings.sse_keepalive_seconds, request.is_disconnected),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/messages")
async def messages(request: Request, sessionId: str | None = None) -> JSONResponse:  # noqa: N803
    """JSON-RPC endpoint for SSE clients."""
    logger.debug(f"POST /messages sessionId={sessionId}")
    return await _handle_rpc(request)


@router.post("/mcp")
async def mcp(request: Request) -> JSONResponse:
    """JSON-RPC endpoint (legacy)."""
    return await _handle_rpc(request)


@router.post("/tools/get_duracube_principles")
async def direct_get_duracube_principles(request: Request) -> Response:
    arguments, error = await _read_json_arguments(request)
    if error is not None:
        return error
    return await _call_tool_directly(request, "get_duracube_principles", arguments)


@router.post("/tools/get_learned_corrections")
async def direct_get_learned_corrections(request: Request) -> Response:
    arguments, error = await _read_json_arguments(request)
    if error is not None:
        return error
    return await _call_tool_directly(request, "get_learned_corrections", arguments)


@router.get("/tools/get_output_format")
async def direct_get_output_format(request: Request) -> Response:
    return await _call_tool_directly(request, "get_output_format")


@router.post("/tools/get_finance_extraction_guide")
async def direct_get_finance_extraction_guide(request: Request) -> Response:
    arguments, error = await _read_json_arguments(request)
    if error is not None:
        return error
    return await _call_tool_directly(request, "get_finance_extraction_guide", arguments)


@router.post("/tools/get_section_principle_mapping")
async def direct_get_section_principle_mapping(request: Request) -> Response:
    arguments, error = await _read_json_arguments(request)
    if error is not None:
        return error
    return await _call_tool_directly(request, "get_section_principle_mapping", arguments)


def create_app(store: KnowledgeStore | None = None, app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        store: Knowledge store to serve; defaults to the process-wide store
        app_settings: Settings to use; defaults to the module-level settings

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings
    store = store or get_knowledge_store()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if app_settings.preload_knowledge:
            try:
                await asyncio.to_thread(store.preload)
                logger.info(f"Preloaded knowledge documents: {store.loaded_documents()}")
            except DocumentLoadError as e:
                logger.error(f"Knowledge preload failed, serving anyway: {e.message}")
        yield

    app = FastAPI(title="DuraCube Contract MCP Server", version=app_settings.server_version, lifespan=lifespan)
    app.state.store = store
    app.state.settings = app_settings
    app.state.server_info = ServerInfo(
        name=app_settings.server_name,
        version=app_settings.server_version,
        protocol_version=app_settings.protocol_version,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Cache-Control"],
        expose_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.debug(f"Request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
        return response

    app.include_router(router)
    return app


app = create_app()
