# src/admin_dashboard/notices.py

import asyncio
import logging
import typing

logger = logging.getLogger("dashboard.notices")

StickyPredicate = typing.Callable[[str], bool]


def sticky_messages(messages: typing.Iterable[str]) -> StickyPredicate:
    """Build a predicate marking the given exact messages as sticky."""
    known = frozenset(messages)
    return lambda message: message in known


class NoticeBoard:
    """
    Holds the single transient notice shown on the login screen.

    A posted notice clears itself after `dismiss_after` seconds unless
    `is_sticky` says it must stay until replaced or dismissed.
    Must be used from within a running event loop.
    """

    def __init__(self, dismiss_after: float = 3.0, is_sticky: typing.Optional[StickyPredicate] = None):
        self.dismiss_after = dismiss_after
        self.is_sticky: StickyPredicate = is_sticky or (lambda message: False)
        self._current: typing.Optional[str] = None
        self._timer: typing.Optional[asyncio.TimerHandle] = None

    @property
    def current(self) -> typing.Optional[str]:
        return self._current

    def post(self, message: str) -> None:
        self._cancel_timer()
        self._current = message or None
        if not self._current or self.is_sticky(self._current):
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.dismiss_after, self.dismiss)

    def dismiss(self) -> None:
        self._cancel_timer()
        self._current = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
