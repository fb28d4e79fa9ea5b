"""Centralized error handling for MCP server."""
from fastmcp import Context

from chartfit.core.exceptions import InvalidSpecError, RenderFailure
from chartfit.core.logging_config import get_logger

from mcp_server.monitoring import metrics

logger = get_logger(__name__)


class MCPError(Exception):
    """Base exception for MCP server errors."""
    pass


class ValidationError(MCPError):
    """Input validation failed."""
    pass


class ResourceNotFoundError(MCPError):
    """Requested resource not found."""
    pass


def classify_error(error: Exception) -> tuple[str, str]:
    """Map an exception to ``(error_type, client_message)``."""
    if isinstance(error, (ValidationError, InvalidSpecError)):
        return "validation_error", str(error)
    if isinstance(error, ResourceNotFoundError):
        return "not_found", str(error)
    if isinstance(error, RenderFailure):
        return "render_error", f"Chart rendering failed: {error}"
    return "internal_error", "An unexpected error occurred. Please contact support."


async def handle_tool_error(
    error: Exception,
    tool_name: str,
    ctx: Context | None = None
) -> dict:
    """
    Standardized error handling for MCP tools.

    Args:
        error: The exception that occurred
        tool_name: Name of the tool that failed
        ctx: MCP context for client logging

    Returns:
        Standardized error response dict
    """
    # Log full error server-side
    logger.exception(f"Error in tool '{tool_name}': {str(error)}")

    error_type, client_message = classify_error(error)
    metrics.record_error(error_type, tool_name)

    # Send sanitized error to client
    if ctx:
        await ctx.error(f"{tool_name} failed: {client_message}")

    return {
        "success": False,
        "error_type": error_type,
        "message": client_message,
        "tool": tool_name
    }
