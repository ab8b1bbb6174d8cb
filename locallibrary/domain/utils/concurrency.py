"""
Structured fan-out/join for independent reads.

A logical operation starts one task per branch, waits at a single barrier
and either returns every result or fails as a whole. Branches never outlive
the call: on failure or cancellation the still-pending ones are cancelled
and awaited before control returns.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from ..exceptions import InternalError, LibraryError

logger = logging.getLogger(__name__)

Branch = Callable[[], Awaitable[Any]]


async def fan_out(**branches: Branch) -> Dict[str, Any]:
    """
    Run named branches concurrently and join their results.

    Fail fast: as soon as one branch raises, the pending branches are
    cancelled and that error is raised. When several branches fail before
    the barrier observes them, which error wins is unspecified; callers
    must not rely on it. No partial result is ever returned.

    Domain errors (LibraryError) and ValueError propagate unchanged; any
    other exception is wrapped in InternalError.

    Args:
        **branches: Zero-argument callables returning awaitables

    Returns:
        Mapping of branch name to its result
    """
    if not branches:
        return {}

    tasks = {name: asyncio.ensure_future(branch()) for name, branch in branches.items()}

    try:
        await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks.values())
        raise

    for name, task in tasks.items():
        if task.done() and not task.cancelled() and task.exception() is not None:
            await _cancel_all(tasks.values())
            raise _translate(name, task.exception())

    return {name: task.result() for name, task in tasks.items()}


async def _cancel_all(tasks) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def _translate(name: str, error: BaseException) -> BaseException:
    if isinstance(error, (LibraryError, ValueError)):
        return error

    logger.error(f"Fan-out branch '{name}' failed unexpectedly: {error!r}")
    internal = InternalError(f"Branch '{name}' failed: {error}")
    internal.__cause__ = error
    return internal


async def run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a synchronous port call in the default executor."""
    return await asyncio.to_thread(func, *args, **kwargs)
