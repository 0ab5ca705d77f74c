"""Shared machinery for stores.

Every store operation goes through :meth:`StoreBase._run`: pending clears
the last error and raises the operation's loading flag, the transport call
resolves, and either the commit callback applies the result (fulfilled) or
the transport error is stored verbatim (rejected). A rejected operation
never touches the store's data.

Concurrent calls are not deduplicated or ordered; the last one to complete
wins.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult
from eesadmin.state.events import OperationPhase, StoreEvent

_logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

Subscriber = Callable[[StoreEvent], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StoreBase:
    """Loading flags, last error and subscriptions shared by all stores."""

    name = "store"
    operations: tuple[str, ...] = ()

    def __init__(self, transport: Transport, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._transport = transport
        self._clock = clock
        self._error: str | None = None
        self._in_flight: dict[str, int] = {}
        self._subscribers: list[Subscriber] = []

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def loading(self) -> dict[str, bool]:
        """Loading flag per operation name."""
        flags = {operation: False for operation in self.operations}
        for operation, count in self._in_flight.items():
            flags[operation] = count > 0
        return flags

    def is_loading(self, operation: str | None = None) -> bool:
        if operation is None:
            return any(count > 0 for count in self._in_flight.values())
        return self._in_flight.get(operation, 0) > 0

    def clear_error(self) -> None:
        self._error = None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for every operation transition.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _emit(self, operation: str, phase: OperationPhase, error: str | None = None) -> None:
        if not self._subscribers:
            return
        event = StoreEvent(
            store=self.name,
            operation=operation,
            phase=phase,
            error=error,
            observed_at=self._clock(),
        )
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                _logger.debug("Subscriber of %s store failed on %s", self.name, operation, exc_info=True)

    # ------------------------------------------------------------------
    # Operation lifecycle
    # ------------------------------------------------------------------

    def _begin(self, operation: str) -> None:
        self._error = None
        self._in_flight[operation] = self._in_flight.get(operation, 0) + 1
        _logger.debug("%s.%s pending", self.name, operation)
        self._emit(operation, OperationPhase.PENDING)

    def _end(self, operation: str) -> None:
        self._in_flight[operation] = max(0, self._in_flight.get(operation, 0) - 1)

    def _settle(self, operation: str, result: ApiResult) -> ApiResult:
        if result.success:
            _logger.debug("%s.%s fulfilled", self.name, operation)
            self._emit(operation, OperationPhase.FULFILLED)
        else:
            self._error = result.error
            _logger.debug("%s.%s rejected: %s", self.name, operation, result.error)
            self._emit(operation, OperationPhase.REJECTED, result.error)
        return result

    def _reject_locally(self, operation: str, message: str) -> ApiResult:
        """Reject *operation* without calling the transport."""
        self._begin(operation)
        self._end(operation)
        return self._settle(operation, ApiResult.fail(message))

    async def _run(
        self,
        operation: str,
        call: Awaitable[ApiResult],
        commit: Callable[[ApiResult], None] | None = None,
    ) -> ApiResult:
        self._begin(operation)
        try:
            result = await call
            if result.success and commit is not None:
                try:
                    commit(result)
                except ValidationError as exc:
                    _logger.debug("%s.%s returned an unexpected payload: %s", self.name, operation, exc)
                    result = ApiResult.fail(
                        f"Unexpected {operation} response from server",
                        status=result.status,
                        data=result.data,
                    )
        finally:
            self._end(operation)
        return self._settle(operation, result)


class EntityStore(StoreBase, Generic[T]):
    """Ordered collection of entities keyed by id, plus a current pointer."""

    name = "entities"

    def __init__(self, transport: Transport, *, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(transport, clock=clock)
        self._items: dict[str, T] = {}
        self._current: T | None = None

    @property
    def items(self) -> list[T]:
        return list(self._items.values())

    def get(self, key: str) -> T | None:
        return self._items.get(key)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    @property
    def current(self) -> T | None:
        return self._current

    def set_current(self, item: T | None) -> None:
        self._current = item

    def clear_current(self) -> None:
        self._current = None

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def _key(self, item: T) -> str:
        return str(item.id)  # type: ignore[attr-defined]

    def _replace_all(self, items: Iterable[T]) -> None:
        self._items = {self._key(item): item for item in items}

    def _append(self, item: T) -> None:
        key = self._key(item)
        self._items.pop(key, None)
        self._items[key] = item

    def _replace(self, item: T) -> None:
        key = self._key(item)
        if key in self._items:
            self._items[key] = item
        if self._current is not None and self._key(self._current) == key:
            self._current = item

    def _remove(self, key: str) -> None:
        self._items.pop(key, None)
        if self._current is not None and self._key(self._current) == key:
            self._current = None

    def _patch(self, key: str, **changes: Any) -> None:
        """Replace fields of the entry with *key* (and of ``current`` when it matches)."""
        item = self._items.get(key)
        if item is not None:
            self._items[key] = item.model_copy(update=changes)
        if self._current is not None and self._key(self._current) == key:
            self._current = self._current.model_copy(update=changes)
