#!/usr/bin/env python3
"""
MCP Server Entry Point for Interview Coder

This is the main entry point for the Interview Coder MCP server, designed to
be directly referenced in the .mcp.json configuration.

This module is part of the Integration Layer and connects the MCP functionality
to the application core.
"""

import sys
import json
import asyncio
import argparse
import platform
from typing import Any, Dict

from loguru import logger

from interview_coder.core import config
from interview_coder.core.runtime import build_runtime
from interview_coder.core.utils import configure_logging
from interview_coder.mcp.mcp_tools import create_mcp_server

SERVER_VERSION = "1.0.0"


def get_server_info() -> Dict[str, Any]:
    """
    Get server information.

    Returns:
        Dict[str, Any]: Server information
    """
    return {
        "name": "Interview Coder MCP Server",
        "version": SERVER_VERSION,
        "description": "Screenshot queues, OCR and Gemini-powered solution generation over MCP",
    }


def health_check() -> Dict[str, Any]:
    """
    Perform a health check.

    Returns:
        Dict[str, Any]: Health check results
    """
    health = build_runtime().service.health()
    health.update({
        "platform": platform.system(),
        "python_version": platform.python_version(),
    })
    return health


def list_tools() -> Dict[str, Any]:
    """
    Describe the registered MCP tools.

    Returns:
        Dict[str, Any]: Tool names mapped to description and input schema
    """
    mcp = create_mcp_server()
    tools = asyncio.run(mcp.list_tools())
    return {
        tool.name: {"description": tool.description, "parameters": tool.inputSchema}
        for tool in tools
    }


def main() -> int:
    """
    Main entry point for the MCP server.

    Returns:
        int: Exit code
    """
    parser = argparse.ArgumentParser(description="Interview Coder MCP Server")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Start server command
    start_parser = subparsers.add_parser("start", help="Start the MCP server")
    start_parser.add_argument("--host", type=str, default="localhost", help="Host to listen on")
    start_parser.add_argument("--port", type=int, default=3000, help="Port to listen on")
    start_parser.add_argument("--data-dir", type=str, default=None, help="Directory for screenshot queues")
    start_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    # Health check command
    subparsers.add_parser("health", help="Check server health")

    # Info command
    subparsers.add_parser("info", help="Display server information")

    # Tools command
    tools_parser = subparsers.add_parser("tools", help="List the registered tools")
    tools_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "start":
        log_level = "DEBUG" if args.debug else config.LOG_LEVEL
        configure_logging(log_level, config.LOG_FILE)

        logger.info("Starting MCP server for Interview Coder")
        logger.info(f"Host: {args.host}, Port: {args.port}, Debug: {args.debug}")

        try:
            runtime = build_runtime(data_dir=args.data_dir)
            mcp = create_mcp_server(runtime, host=args.host, port=args.port)
            mcp.run()
        except KeyboardInterrupt:
            logger.info("Server stopped by user")
            return 0
        except Exception as e:
            logger.exception(f"Server failed to start: {str(e)}")
            return 1

    elif args.command == "health":
        configure_logging("WARNING")
        result = health_check()
        print(json.dumps(result, indent=2))
        return 0 if result["status"] == "healthy" else 1

    elif args.command == "info":
        print(json.dumps(get_server_info(), indent=2))
        return 0

    elif args.command == "tools":
        configure_logging("WARNING")
        tools = list_tools()
        if args.json:
            print(json.dumps(tools, indent=2))
        else:
            for tool_name, tool_info in tools.items():
                print(f"Tool: {tool_name}")
                description = (tool_info.get("description") or "No description").strip()
                print(f"  Description: {description.splitlines()[0]}")
                print("  Parameters:")
                for param_name, param_info in tool_info.get("parameters", {}).get("properties", {}).items():
                    print(f"    {param_name}: {param_info.get('type', 'any')}")
                print()
        return 0

    return 0


if __name__ == "__main__":
    """
    Direct entry point for the Interview Coder MCP server.
    This file is designed to be referenced in .mcp.json.

    Usage:
      python -m interview_coder.mcp.mcp_server start [--host HOST] [--port PORT] [--debug]
      python -m interview_coder.mcp.mcp_server health
      python -m interview_coder.mcp.mcp_server info
      python -m interview_coder.mcp.mcp_server tools [--json]
    """
    sys.exit(main())
