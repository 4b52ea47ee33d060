#!/usr/bin/env python3
# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey MCP Server

Tools live in journey_mcp/tools/. Importing a module registers its tools
via the @tool() decorator.

5 tools:
- journey: journey_analyze, journey_state, journey_resonance,
           journey_recommendations, journey_depth
"""

import asyncio
import atexit
import logging

from journey_mcp._app import mcp, shutdown_executor
import journey_mcp.tools.journey as _journey_tools

logger = logging.getLogger("journey.server")


def _shutdown() -> None:
    try:
        asyncio.run(_journey_tools.close_engines())
    except Exception as e:
        logger.warning("Engine shutdown incomplete: %s", e)
    shutdown_executor()
    logger.info("Journey server stopped")


atexit.register(_shutdown)


def main() -> None:
    logger.info("Journey MCP server starting")
    mcp.run()


if __name__ == "__main__":
    main()
