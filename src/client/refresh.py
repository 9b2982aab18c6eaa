"""Per-resource request bookkeeping for the dashboard controller.

Each logical resource (profile, stats, details, ...) owns one
:class:`RefreshSlot`. A slot hands out increasing tokens; only the result
carrying the newest token may be applied, so responses land in issue order
even when they arrive out of order. Callers hold their own lock around every
slot method.
"""

from concurrent.futures import Future
from typing import Optional


class RefreshSlot:
    """Single-flight tracker for one resource."""

    def __init__(self, name: str):
        self.name = name
        self._token = 0
        self._future: Optional[Future] = None

    @property
    def in_flight(self) -> bool:
        """True from ``attach`` until ``finish`` or ``invalidate`` releases the slot.

        A future reports done before its callbacks run, so completion alone
        does not release the slot.
        """
        return self._future is not None

    @property
    def token(self) -> int:
        return self._token

    def begin(self, force: bool = False) -> Optional[int]:
        """Reserve a token for a new request.

        Returns ``None`` when a request is already outstanding and ``force`` is
        False. A forced request supersedes the outstanding one, whose result
        will then be dropped.
        """
        if self.in_flight and not force:
            return None
        self._token += 1
        return self._token

    def attach(self, token: int, future: Future) -> None:
        if token == self._token:
            self._future = future

    def is_current(self, token: int) -> bool:
        return token == self._token

    def finish(self, token: int) -> None:
        if token == self._token:
            self._future = None

    def invalidate(self) -> None:
        """Orphan any outstanding request and cancel it if it has not started."""
        self._token += 1
        if self._future is not None:
            self._future.cancel()
        self._future = None
