"""Pull, push and collect consumption over one exclusive reader.

``SSEStream`` wraps an async sequence of values. Every consumption style goes
through the same reader lock, so only one consumer can drain the sequence at
a time:

- ``async for value in stream`` acquires the reader for each advance and
  releases it before handing the value out.
- ``stream.subscribe(on_value, on_complete)`` holds the reader until its pump
  loop ends.
- ``await stream.collect_all()`` is a subscription that gathers every value.

Mixing styles on one stream is a misuse. An attempt to acquire a held reader
raises ``ReaderLockedError``, but nothing serializes pulls that interleave
between two advances of an ``async for`` loop.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterable, AsyncIterator, Callable, Generic, Iterator, TypeVar

from sse_stream.errors import ReaderLockedError, SSEStreamError, UpstreamReadError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """Outcome of one read: a value, or ``done`` once the sequence ended."""

    done: bool
    value: T | None = None


class StreamReader(Generic[T]):
    """Exclusive handle on an ``SSEStream``. Release it when finished."""

    def __init__(self, stream: SSEStream[T]):
        self._stream = stream
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def read(self) -> ReadResult[T]:
        if self._released:
            raise SSEStreamError("Cannot read from a released reader")
        return await self._stream._read_next()

    def release_lock(self) -> None:
        if self._released:
            return
        self._released = True
        self._stream._release(self)


class SubscriptionState(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Subscription:
    """Handle returned by ``SSEStream.subscribe``. Calling it cancels.

    Cancellation is cooperative: a read already in flight finishes, its value
    is dropped, and the pump stops without reading again. A cancelled
    subscription never reports completion.
    """

    def __init__(self, on_complete: Callable[[], None] | None = None):
        self.state = SubscriptionState.ACTIVE
        self._on_complete = on_complete
        self._task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self.state is SubscriptionState.ACTIVE

    def cancel(self) -> None:
        if self.state is SubscriptionState.ACTIVE:
            self.state = SubscriptionState.CANCELLED

    def __call__(self) -> None:
        self.cancel()

    async def wait(self) -> None:
        """Wait until the pump loop has exited and released the reader."""
        if self._task is not None:
            await asyncio.wait([self._task])

    def _complete(self) -> None:
        # The state flips first so on_complete runs at most once.
        if self.state is not SubscriptionState.ACTIVE:
            return
        self.state = SubscriptionState.COMPLETED
        if self._on_complete is not None:
            self._on_complete()


class SSEStream(Generic[T]):
    """A sequence of parsed values consumable by pull, push or collection."""

    def __init__(self, values: AsyncIterable[T]):
        self._values = values.__aiter__()
        self._reader: StreamReader[T] | None = None
        self._exhausted = False
        self._pumps: set[asyncio.Task[None]] = set()
        self._collectors: set[Callable[[], None]] = set()

    # --- Reader lock ---

    @property
    def locked(self) -> bool:
        return self._reader is not None

    def get_reader(self) -> StreamReader[T]:
        if self._reader is not None:
            raise ReaderLockedError("Stream is already locked to a reader")
        self._reader = StreamReader(self)
        return self._reader

    @contextmanager
    def reader(self) -> Iterator[StreamReader[T]]:
        """Acquire the reader for the duration of a ``with`` block."""
        reader = self.get_reader()
        try:
            yield reader
        finally:
            reader.release_lock()

    def _release(self, reader: StreamReader[T]) -> None:
        if self._reader is reader:
            self._reader = None

    async def _read_next(self) -> ReadResult[T]:
        if self._exhausted:
            return ReadResult(done=True)

        try:
            value = await anext(self._values)
        except StopAsyncIteration:
            self._exhausted = True
            return ReadResult(done=True)
        except SSEStreamError:
            self._exhausted = True
            raise
        except Exception as e:
            self._exhausted = True
            raise UpstreamReadError(f"Error reading stream: {e}", cause=e) from e

        return ReadResult(done=False, value=value)

    async def aclose(self) -> None:
        """Stop running subscriptions and the underlying sequence.

        Stopped subscriptions do not report completion, but pending
        ``collect_all`` futures resolve with the values gathered so far.
        Later reads report ``done``.
        """
        self._exhausted = True
        pumps = list(self._pumps)
        for task in pumps:
            task.cancel()
        if pumps:
            await asyncio.gather(*pumps, return_exceptions=True)
        for resolve in list(self._collectors):
            resolve()
        aclose = getattr(self._values, "aclose", None)
        if aclose is not None:
            await aclose()

    # --- Pull ---

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        while True:
            with self.reader() as reader:
                result = await reader.read()
            if result.done:
                return
            if result.value is None:
                continue
            yield result.value

    # --- Push ---

    def subscribe(
        self,
        on_value: Callable[[T], None],
        on_complete: Callable[[], None] | None = None,
    ) -> Subscription:
        """Deliver every value to ``on_value`` from a background pump.

        ``on_complete`` fires once when the sequence ends. Read errors are
        logged and reported as completion. Requires a running event loop.
        """
        loop = asyncio.get_running_loop()
        reader = self.get_reader()
        subscription = Subscription(on_complete)

        task = loop.create_task(self._pump(reader, subscription, on_value))
        subscription._task = task
        self._pumps.add(task)
        task.add_done_callback(self._pumps.discard)
        # A task cancelled before its first step never runs its finally block.
        task.add_done_callback(lambda _: reader.release_lock())
        return subscription

    async def _pump(
        self,
        reader: StreamReader[T],
        subscription: Subscription,
        on_value: Callable[[T], None],
    ) -> None:
        try:
            while subscription.active:
                try:
                    result = await reader.read()
                except Exception:
                    logger.exception("Error reading stream")
                    subscription._complete()
                    break
                if result.done:
                    subscription._complete()
                    break
                if result.value is not None and subscription.active:
                    on_value(result.value)
        except asyncio.CancelledError:
            subscription.cancel()
            raise
        except Exception:
            logger.exception("Error in subscriber callback")
            subscription._complete()
        finally:
            reader.release_lock()

    # --- Collect ---

    def collect_all(self) -> asyncio.Future[list[T]]:
        """Gather every value. Never resolves for an unbounded stream.

        Cancelling the returned future (for example through
        ``asyncio.wait_for``) cancels the pump and its in-flight read, and
        releases the reader.
        """
        future: asyncio.Future[list[T]] = asyncio.get_running_loop().create_future()
        values: list[T] = []

        def resolve() -> None:
            self._collectors.discard(resolve)
            if not future.done():
                future.set_result(values)

        subscription = self.subscribe(values.append, resolve)
        self._collectors.add(resolve)

        def on_done(done: asyncio.Future[list[T]]) -> None:
            self._collectors.discard(resolve)
            if done.cancelled() and subscription._task is not None:
                subscription.cancel()
                subscription._task.cancel()

        future.add_done_callback(on_done)
        return future
