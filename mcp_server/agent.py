"""
Agent construction and service dispatch for MCP tool handlers.

Every tool invocation gets a fresh StoryAgent built from the cached config.
Services are synchronous and may wait minutes for a receipt, so handlers run
them in a worker thread and the stdio event loop keeps serving other
requests.
"""
import functools
from typing import Any, Callable

import anyio

from story_build.chain import StoryAgent
from story_build.config import load_config


def get_agent() -> StoryAgent:
    """Build a StoryAgent for the configured network and wallet."""
    return StoryAgent(load_config())


async def run_service(service: Callable[..., Any], *args, **kwargs) -> Any:
    """Run a blocking service call in a worker thread."""
    return await anyio.to_thread.run_sync(functools.partial(service, *args, **kwargs))


async def run_with_agent(service: Callable[..., Any], *args, **kwargs) -> Any:
    """Build an agent and run service(agent, *args, **kwargs) in a worker thread."""
    def call():
        return service(get_agent(), *args, **kwargs)

    return await anyio.to_thread.run_sync(call)
