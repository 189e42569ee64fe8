"""Current-value holders with change notification."""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

Listener = Callable[[T], None]
Predicate = Callable[[T], bool]


class ObservableValue(Generic[T]):
    """Holds the latest value and notifies listeners on every ``set``."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []
        self._waiters: list[tuple[Predicate[T], asyncio.Future[T]]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("observable_listener_failed")
        for predicate, future in list(self._waiters):
            if not future.done() and predicate(value):
                future.set_result(value)

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_for(self, predicate: Predicate[T], timeout: float | None = None) -> T:
        """Wait until the held value satisfies ``predicate``."""
        if predicate(self._value):
            return self._value
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        entry = (predicate, future)
        self._waiters.append(entry)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self._waiters.remove(entry)
