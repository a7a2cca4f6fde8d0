import asyncio
import inspect
import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelled(Exception):
    """
    Raised at a suspension point once its CancelSignal is set.

    This is control flow, not a failure: the orchestrator turns it into a
    silent CANCELLED exit.
    """


class CancelSignal:
    """A simple wrapper around asyncio.Event for cancellation."""

    def __init__(self):
        self._event = asyncio.Event()

    def set(self):
        """Signal that cancellation has been requested."""
        self._event.set()

    def is_set(self) -> bool:
        """Check if cancellation has been signaled."""
        return self._event.is_set()

    async def wait(self):
        """Wait until the cancellation is signaled."""
        await self._event.wait()

    def raise_if_set(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await `awaitable` unless cancellation is signaled first.

        On cancellation the pending work is cancelled and OperationCancelled
        is raised. An unstarted coroutine is closed if the signal is
        already set.
        """
        if self._event.is_set():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if work in done:
            return work.result()

        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Discarding error from cancelled work: {e}")
        raise OperationCancelled()
