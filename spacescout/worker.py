from __future__ import annotations
import logging
from typing import Optional

from PySide6.QtCore import QThread, Signal

from .events import INTERMEDIATE_EVENT, PROGRESS_EVENT
from .scanner import Scanner

logger = logging.getLogger(__name__)


class ScanThread(QThread):
    progress = Signal(object)      # ScanProgress
    intermediate = Signal(object)  # FileNode preview
    done = Signal(object)          # FileNode
    error = Signal(str)

    def __init__(self, path: str, scanner: Optional[Scanner] = None, parent=None):
        super().__init__(parent)
        self.path = path
        self.scanner = scanner or Scanner()

    def _on_event(self, event: str, payload):
        if event == PROGRESS_EVENT:
            self.progress.emit(payload)
        elif event == INTERMEDIATE_EVENT:
            self.intermediate.emit(payload)

    def run(self):
        try:
            tree = self.scanner.scan(self.path, self._on_event)
        except Exception as e:
            logger.debug("scan thread error", exc_info=True)
            self.error.emit(str(e))
            return
        self.done.emit(tree)

    def cancel(self):
        self.scanner.cancel()
