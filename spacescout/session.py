from __future__ import annotations
from dataclasses import dataclass

from .cache import FileCache
from .cancel import CancelToken
from .config import ScanSettings
from .events import Emitter


@dataclass
class ScanSession:
    """Everything one scan needs, owned by the Scanner and handed to the strategies."""
    root: str
    token: CancelToken
    emitter: Emitter
    cache: FileCache
    settings: ScanSettings

    @property
    def scan_id(self) -> int:
        return self.token.scan_id

    @property
    def home(self) -> str:
        return self.settings.home_dir()

    def check_cancel(self, where: str = ""):
        self.token.check(where)
