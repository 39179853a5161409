"""
MCP Layer for Interview Coder

This package contains the MCP (Model Context Protocol) layer, exposing the
screenshot queues and processing coordinator as tools for AI agents.

The MCP layer is designed to:
1. Expose core functions as MCP tools
2. Handle MCP-specific protocol requirements
3. Manage server startup and configuration
4. Implement MCP-compatible error handling

Usage:
    # Start the MCP server
    python -m interview_coder.mcp.mcp_server start

    # Use the MCP server in Python
    from interview_coder.mcp import create_mcp_server
    mcp = create_mcp_server()
    mcp.run()
"""

# MCP server creation
from interview_coder.mcp.mcp_tools import create_mcp_server

# MCP server entry point
from interview_coder.mcp.mcp_server import (
    main,
    health_check,
    get_server_info,
    list_tools
)

# MCP wrappers
from interview_coder.mcp.wrappers import (
    take_screenshot_wrapper,
    get_queue_wrapper,
    delete_screenshot_wrapper,
    remove_previous_screenshot_wrapper,
    image_preview_wrapper,
    set_view_wrapper,
    process_screenshots_wrapper,
    cancel_requests_wrapper,
    reset_wrapper,
    health_wrapper,
    collect_events,
    format_mcp_response
)

__all__ = [
    # MCP server
    'create_mcp_server',
    'main',
    'health_check',
    'get_server_info',
    'list_tools',

    # MCP wrappers
    'take_screenshot_wrapper',
    'get_queue_wrapper',
    'delete_screenshot_wrapper',
    'remove_previous_screenshot_wrapper',
    'image_preview_wrapper',
    'set_view_wrapper',
    'process_screenshots_wrapper',
    'cancel_requests_wrapper',
    'reset_wrapper',
    'health_wrapper',
    'collect_events',
    'format_mcp_response'
]

# Example configuration for .mcp.json
EXAMPLE_MCP_CONFIG = """
{
  "mcpServers": {
    "interview-coder": {
      "command": "interview-coder-mcp",
      "args": ["start"],
      "env": {"GEMINI_API_KEY": "..."}
    }
  }
}
"""
