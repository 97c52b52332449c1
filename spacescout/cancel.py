from __future__ import annotations
import itertools
import logging
import threading
from typing import Optional

from .errors import CancelledError

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class CancelToken:
    def __init__(self):
        self.scan_id = next(_ids)
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    def reset(self):
        self._event.clear()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self._event.is_set()

    def check(self, where: str = ""):
        if self._event.is_set():
            logger.info("scan %d cancelled%s", self.scan_id, f" during {where}" if where else "")
            raise CancelledError()


class CancelRegistry:
    """Holds the token of the current scan. Registering replaces the previous one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._current: Optional[CancelToken] = None

    def register(self) -> CancelToken:
        token = CancelToken()
        token.reset()
        with self._lock:
            self._current = token
        return token

    @property
    def current(self) -> Optional[CancelToken]:
        with self._lock:
            return self._current

    def cancel(self, scan_id: Optional[int] = None) -> None:
        with self._lock:
            token = self._current
        if token is None:
            return
        if scan_id is not None and token.scan_id != scan_id:
            logger.debug("cancel for stale scan %d ignored (current is %d)", scan_id, token.scan_id)
            return
        token.cancel()
        logger.info("scan %d cancellation requested", token.scan_id)

    def release(self, token: CancelToken) -> None:
        with self._lock:
            if self._current is token:
                self._current = None
