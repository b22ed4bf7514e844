import asyncio
from typing import Any, Awaitable, Callable


def _apply_nest_asyncio() -> None:
    """Allow re-entrant event loops under IPython."""
    try:
        from IPython.core.getipython import get_ipython

        if get_ipython() is not None:
            import nest_asyncio

            nest_asyncio.apply()

    except ImportError:
        pass


def get_running_loop() -> asyncio.AbstractEventLoop | None:
    """Get the running event loop, or None when called from synchronous code."""
    _apply_nest_asyncio()
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def synchronize(afunc: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
    """Run async function in synchronous context.

    Without a running loop, ``asyncio.run`` creates and closes a fresh one.
    """
    loop = get_running_loop()
    if loop is None:
        return asyncio.run(afunc(*args, **kwargs))
    return loop.run_until_complete(afunc(*args, **kwargs))
