# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Shared FastMCP application instance and tool registration.

Async tools (anything that awaits a JourneyEngine) register as-is. Sync
tools are wrapped in async def + run_in_executor so a slow text analysis
doesn't block concurrent MCP calls. Every raw function is also kept in
_TOOL_REGISTRY so the CLI and tests can call tools directly.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor

from core.paths import get_paths

# Central logging config, all journey.* loggers route here
_log_path = get_paths().engine_log
_log_path.parent.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.FileHandler(str(_log_path)),
    ],
)

from mcp.server.fastmcp import FastMCP

mcp = FastMCP("journey")

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="journey-tool")

logger = logging.getLogger("journey.app")

_TOOL_REGISTRY: dict = {}


def tool():
    """Decorator replacing @mcp.tool(); stores the raw function, wraps sync ones."""
    def decorator(fn):
        _TOOL_REGISTRY[fn.__name__] = fn

        if not asyncio.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(**kwargs):
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(_executor, lambda: fn(**kwargs))
            mcp.tool()(async_wrapper)
        else:
            mcp.tool()(fn)
        return fn

    return decorator


def get_tool(name: str):
    return _TOOL_REGISTRY[name]


def shutdown_executor() -> None:
    """Graceful shutdown of the tool executor pool."""
    _executor.shutdown(wait=False)
    logger.info("Tool executor pool shut down")
