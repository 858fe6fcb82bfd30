"""Run the DuraCube contract knowledge server: ``python -m duracube_mcp``."""

import uvicorn
from loguru import logger

from duracube_mcp.config.settings import settings
from duracube_mcp.core.logger import setup_logger

ENDPOINTS = (
    ("GET ", "/health", "Health check"),
    ("GET ", "/sse", "SSE endpoint for MCP clients"),
    ("POST", "/messages", "MCP messages endpoint"),
    ("GET ", "/tools", "List available tools"),
    ("POST", "/mcp", "MCP JSON-RPC endpoint"),
    ("POST", "/tools/get_duracube_principles", "Direct tool call"),
    ("POST", "/tools/get_learned_corrections", "Direct tool call"),
    ("GET ", "/tools/get_output_format", "Direct tool call"),
    ("POST", "/tools/get_finance_extraction_guide", "Direct tool call"),
    ("POST", "/tools/get_section_principle_mapping", "Direct tool call"),
)


def main() -> None:
    setup_logger(level=settings.log_level, log_file=settings.log_file)

    from duracube_mcp.server.app import app

    logger.info(f"DuraCube Contract MCP Server running on http://{settings.server_host}:{settings.port}")
    logger.info(f"Knowledge directory: {settings.knowledge_dir}")
    logger.info("Endpoints:")
    for method, path, description in ENDPOINTS:
        logger.info(f"  {method} {path} - {description}")

    uvicorn.run(app, host=settings.server_host, port=settings.port)


if __name__ == "__main__":
    main()
