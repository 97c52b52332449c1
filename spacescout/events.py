from __future__ import annotations
import logging
import time
from typing import Any, Callable, Optional

from .config import EMIT_INTERVAL
from .models import FileNode, ScanProgress

logger = logging.getLogger(__name__)

PROGRESS_EVENT = "scan-progress"
INTERMEDIATE_EVENT = "scan-intermediate"

Sink = Callable[[str, Any], None]  # (event_name, payload)


class Emitter:
    def __init__(self, sink: Optional[Sink] = None,
                 interval: float = EMIT_INTERVAL,
                 clock: Callable[[], float] = time.monotonic):
        self.sink = sink
        self.interval = interval
        self.clock = clock
        self.items_processed = 0
        self._last_emit: Optional[float] = None

    def add_items(self, n: int = 1):
        self.items_processed += n

    def set_items(self, n: int):
        self.items_processed = n

    def progress(self, status: str) -> bool:
        now = self.clock()
        if self._last_emit is not None and now - self._last_emit < self.interval:
            return False
        self._last_emit = now
        self._send(PROGRESS_EVENT, ScanProgress(status, self.items_processed))
        return True

    def intermediate(self, tree: FileNode):
        self._send(INTERMEDIATE_EVENT, tree)

    def _send(self, event: str, payload: Any):
        if self.sink is None:
            return
        try:
            self.sink(event, payload)
        except Exception:
            logger.exception("event sink failed on %s", event)
