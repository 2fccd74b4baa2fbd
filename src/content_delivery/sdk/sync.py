"""
Blocking API wrappers for async stack methods.
"""

import asyncio
import threading
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from .core.sync import (
    detect_event_loop_state,
    create_thread_local_loop,
    run_in_thread_pool,
)

F = TypeVar("F", bound=Callable[..., Any])

_thread_local = threading.local()


def get_or_create_event_loop() -> asyncio.AbstractEventLoop:
    """Get this thread's private loop for blocking calls, creating it if needed.

    The loop is kept for the life of the thread so pooled HTTP connections
    stay bound to a single loop across calls.
    """
    loop = getattr(_thread_local, "loop", None)
    if loop is None or loop.is_closed():
        loop = create_thread_local_loop()
        _thread_local.loop = loop
    return cast(asyncio.AbstractEventLoop, loop)


def sync_wrapper(async_func: F) -> F:
    """
    Decorator to create a blocking version of an async method.

    Handles thread-safe event loop management. Called from inside a running
    loop, the coroutine runs on a worker thread instead.
    """

    @wraps(async_func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        loop_state = detect_event_loop_state()

        if loop_state == "running":
            # Running in an existing async context
            return run_in_thread_pool(async_func(*args, **kwargs))
        else:
            loop = get_or_create_event_loop()
            return loop.run_until_complete(async_func(*args, **kwargs))

    return cast(F, wrapper)


class SyncStackMixin:
    """Mixin providing blocking versions of async stack methods."""

    def sync_blocking(self, **kwargs: Any) -> Any:
        """Blocking version of sync."""
        return sync_wrapper(getattr(self, "sync"))(**kwargs)

    def sync_pagination_token_blocking(self, pagination_token: str, **kwargs: Any) -> Any:
        """Blocking version of sync_pagination_token."""
        return sync_wrapper(getattr(self, "sync_pagination_token"))(
            pagination_token, **kwargs
        )

    def sync_token_blocking(self, sync_token: str, **kwargs: Any) -> Any:
        """Blocking version of sync_token."""
        return sync_wrapper(getattr(self, "sync_token"))(sync_token, **kwargs)

    def sync_from_date_blocking(self, from_date: Any, **kwargs: Any) -> Any:
        """Blocking version of sync_from_date."""
        return sync_wrapper(getattr(self, "sync_from_date"))(from_date, **kwargs)

    def sync_content_type_blocking(self, content_type: str, **kwargs: Any) -> Any:
        """Blocking version of sync_content_type."""
        return sync_wrapper(getattr(self, "sync_content_type"))(content_type, **kwargs)

    def sync_locale_blocking(self, locale: str, **kwargs: Any) -> Any:
        """Blocking version of sync_locale."""
        return sync_wrapper(getattr(self, "sync_locale"))(locale, **kwargs)

    def sync_publish_type_blocking(self, publish_type: Any, **kwargs: Any) -> Any:
        """Blocking version of sync_publish_type."""
        return sync_wrapper(getattr(self, "sync_publish_type"))(publish_type, **kwargs)

    def sync_with_blocking(self, **kwargs: Any) -> Any:
        """Blocking version of sync_with."""
        return sync_wrapper(getattr(self, "sync_with"))(**kwargs)

    def get_content_types_blocking(
        self, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Blocking version of get_content_types."""
        return sync_wrapper(getattr(self, "get_content_types"))(params)
