"""
Loading gate — one in-flight mutation per aggregate.

Re-entrant calls are rejected with ``BUSY`` instead of queueing behind a lock.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from kungfu import Error, Result

from cartflow.errors import CheckoutError, ErrorKind


class LoadingGate:
    __slots__ = ("_loading", "_name")

    def __init__(self, name: str) -> None:
        self._name = name
        self._loading = False

    @property
    def loading(self) -> bool:
        return self._loading

    async def guard[T](
        self,
        operation: Callable[[], Awaitable[Result[T, CheckoutError]]],
    ) -> Result[T, CheckoutError]:
        if self._loading:
            return Error(CheckoutError(ErrorKind.BUSY, f"{self._name} is busy with another operation"))
        self._loading = True
        try:
            return await operation()
        finally:
            self._loading = False


__all__ = ("LoadingGate",)
