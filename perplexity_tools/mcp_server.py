# =============================================================================
# perplexity_tools/mcp_server.py  —  FastMCP Tool Server for Perplexity Ask
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes ONE MCP tool, perplexity_ask, that forwards a conversation to the
#   Perplexity Sonar API and returns the answer (plus citations) as text.
#
# HOW IT WORKS (the flow):
#   1. An MCP client calls "perplexity_ask" over stdio
#   2. ProtocolErrorMiddleware checks the tool name and the "messages" argument
#      and drops any other argument
#   3. FastMCP validates each message against the Message schema (extra keys
#      on a message are kept and sent upstream untouched)
#   4. The tool calls PerplexityClient.perform_chat_completion()
#   5. The answer goes back as a single text content item, isError=false
#
# ERRORS (JSON-RPC error responses, never isError results):
#   - unknown tool name         → METHOD_NOT_FOUND (-32601)
#   - bad/missing "messages"    → INVALID_PARAMS   (-32602)
#   - anything from Perplexity  → INTERNAL_ERROR   (-32603)
#
# RUNNING THIS SERVER:
#     python -m perplexity_tools.mcp_server
#   or the "perplexity-ask" console script.  PERPLEXITY_API_KEY must be set
#   (in the environment or a .env file), otherwise the process exits with 1.
# =============================================================================

import logging
import sys
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError, ValidationError
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.base import ToolResult
from mcp import MCPError
from mcp_types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolRequestParams,
)
from pydantic import Field

from perplexity_core import ConfigError, Message, PerplexityClient, load_settings

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON stream, so every log line goes to STDERR.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for responses
#     - YELLOW for intermediate status/progress messages
#     - RED for protocol errors sent back to the client
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

SERVER_NAME = "perplexity-ask"
SERVER_VERSION = "0.1.0"

TOOL_NAME = "perplexity_ask"
TOOL_DESCRIPTION = (
    "Engages in a conversation using the Perplexity Sonar API. "
    "Accepts an array of messages (each with a role and content) "
    "and returns a chat completion response from the Perplexity model."
)
INVALID_MESSAGES = f'Invalid arguments for {TOOL_NAME}: "messages" must be an array'


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: str) -> str:
    """Log the size of the tool's text answer in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {len(result)} chars{_RESET}")
    return result


def _protocol_error(code: int, message: str) -> MCPError:
    logging.error(f"{_RED}[MCP Error] {code} {message}{_RESET}")
    return MCPError(code=code, message=message)


# =============================================================================
# ProtocolErrorMiddleware
# =============================================================================
# FastMCP's defaults report an unknown tool or a failing tool body as an
# isError RESULT.  MCP clients of this server expect JSON-RPC ERRORS with
# the standard codes instead, so every tools/call passes through here first.
# The name and "messages" checks run before FastMCP looks anything up, which
# also guarantees the Perplexity client is never reached on bad input.
# =============================================================================
class ProtocolErrorMiddleware(Middleware):
    """Maps tools/call failures to METHOD_NOT_FOUND / INVALID_PARAMS / INTERNAL_ERROR."""

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        name = context.message.name
        arguments = context.message.arguments or {}

        if name != TOOL_NAME:
            raise _protocol_error(METHOD_NOT_FOUND, f"Unknown tool: {name}")
        if not isinstance(arguments.get("messages"), list):
            raise _protocol_error(INVALID_PARAMS, INVALID_MESSAGES)

        # Arguments other than "messages" are ignored, not rejected.
        if arguments.keys() != {"messages"}:
            context = context.copy(
                message=context.message.model_copy(
                    update={"arguments": {"messages": arguments["messages"]}}
                )
            )

        try:
            return await call_next(context)
        except ValidationError as e:
            raise _protocol_error(
                INVALID_PARAMS, f"Invalid arguments for {TOOL_NAME}: {e}"
            ) from e
        except ToolError as e:
            # FastMCP wraps whatever the tool body raised; report the original.
            cause = e.__cause__ or e
            raise _protocol_error(
                INTERNAL_ERROR, f"Error processing request: {cause}"
            ) from e


# =============================================================================
# Server factory
# =============================================================================
# The client is passed in rather than built here, so tests can hand over a
# PerplexityClient wired to an httpx.MockTransport.
# =============================================================================
def create_server(client: PerplexityClient) -> FastMCP:
    """Build the FastMCP server exposing perplexity_ask backed by ``client``."""
    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
    mcp.add_middleware(ProtocolErrorMiddleware())

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION, output_schema=None)
    async def perplexity_ask(
        messages: Annotated[
            list[Message], Field(description="Array of conversation messages")
        ],
    ) -> str:
        _log_request(TOOL_NAME, message_count=len(messages))
        _log_status(f"Asking {client.model} ({len(messages)} messages)")
        result = await client.perform_chat_completion(messages)
        return _log_response(TOOL_NAME, result)

    return mcp


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    """Read the API key, build the server and serve MCP over stdio."""
    load_dotenv()

    try:
        settings = load_settings()
    except ConfigError as e:
        logging.error(f"{_RED}{e}{_RESET}")
        sys.exit(1)

    server = create_server(PerplexityClient(settings))
    logging.info("Perplexity Ask MCP Server running on stdio")
    try:
        server.run(transport="stdio", show_banner=False)
    except Exception:
        logging.exception("Perplexity Ask MCP Server stopped with an error")
        sys.exit(1)


if __name__ == "__main__":
    main()
