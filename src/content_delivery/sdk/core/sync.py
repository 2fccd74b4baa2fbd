"""
Pure functions for sync wrapper operations.

Functions for event loop detection and running coroutines from
blocking code.
"""

import asyncio
import concurrent.futures
from typing import Any, Optional


def detect_event_loop_state() -> str:
    """Detect current event loop state.

    Returns:
        - "none": No event loop is running in the current thread
        - "running": An event loop is running in the current thread
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return "none"
    return "running"


def create_thread_local_loop() -> asyncio.AbstractEventLoop:
    """Create a new event loop for thread-local use."""
    return asyncio.new_event_loop()


def run_in_thread_pool(coro: Any, timeout: Optional[float] = None) -> Any:
    """Run coroutine to completion on a fresh loop in a worker thread."""
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(asyncio.run, coro)
        return future.result(timeout=timeout)
