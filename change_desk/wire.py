"""
Wired Queries

A subscription to a server-backed query. The query runs when it is
started, re-runs whenever its parameters change, and can be refreshed
manually through the same handle. Subscribers receive every result.

Usage:
    wire = WiredQuery(backend.get_request_by_id, name="request")
    wire.subscribe(on_result)
    await wire.set_params(request_id="r1")   # fetches
    await wire.refresh()                     # same query, fetched again
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WireResult(Generic[T]):
    """Outcome of one query run. At most one of data/error is set."""

    data: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class WiredQuery(Generic[T]):
    """Query cache with change notification and manual refresh.

    A query whose parameters include a None value is not runnable: it
    publishes an empty result instead of calling the fetch function.

    Args:
        fetch: Async callable invoked with the current parameters
        params: Initial parameters
        name: Label used in log messages
    """

    def __init__(
        self,
        fetch: Callable[..., Awaitable[T]],
        params: Optional[Dict[str, Any]] = None,
        name: str = "",
    ):
        self._fetch = fetch
        self._params: Dict[str, Any] = dict(params or {})
        self._name = name or getattr(fetch, "__name__", "query")
        self._subscribers: List[Callable[[WireResult[T]], None]] = []
        self._result: WireResult[T] = WireResult()
        self._generation = 0
        self._started = False

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self._params)

    @property
    def result(self) -> WireResult[T]:
        """Last published result."""
        return self._result

    @property
    def data(self) -> Optional[T]:
        return self._result.data

    @property
    def error(self) -> Optional[BaseException]:
        return self._result.error

    @property
    def started(self) -> bool:
        return self._started

    @property
    def runnable(self) -> bool:
        return all(value is not None for value in self._params.values())

    def subscribe(self, callback: Callable[[WireResult[T]], None]) -> None:
        """Register a callback for every published result."""
        self._subscribers.append(callback)

    async def start(self) -> WireResult[T]:
        """Run the query for the first time. Errors go to subscribers only."""
        self._started = True
        return await self._run()

    async def set_params(self, **params: Any) -> WireResult[T]:
        """Update parameters and re-run the query if they changed."""
        merged = {**self._params, **params}
        if self._started and merged == self._params:
            return self._result
        self._params = merged
        self._started = True
        return await self._run()

    async def refresh(self) -> WireResult[T]:
        """Re-run the query with its current parameters.

        The result is published to subscribers as usual; a failed fetch
        is also raised to the caller.
        """
        self._started = True
        result = await self._run()
        if result.error is not None:
            raise result.error
        return result

    async def _run(self) -> WireResult[T]:
        self._generation += 1
        generation = self._generation

        if not self.runnable:
            result: WireResult[T] = WireResult()
        else:
            logger.debug(f"Wire {self._name} fetching with {self._params}")
            try:
                result = WireResult(data=await self._fetch(**self._params))
            except Exception as e:
                logger.warning(f"Wire {self._name} failed: {e}")
                result = WireResult(error=e)

        # A newer run started while this one was in flight
        if generation != self._generation:
            return result

        self._result = result
        for callback in list(self._subscribers):
            callback(result)
        return result
