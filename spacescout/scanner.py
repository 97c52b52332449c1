from __future__ import annotations
import logging
import os
import stat as statmod
import time
from typing import Optional

from .cache import FileCache, shared_cache
from .cancel import CancelRegistry
from .config import ScanSettings
from .errors import NotFoundError, ScanError
from .events import Emitter, Sink
from .fallback import FallbackScanner
from .finders import ChildSizeSummarizer, DuSummarizer, LargeFileFinder, SpotlightFinder
from .indexed import IndexedScanner
from .models import FileNode
from .session import ScanSession
from .utils import format_size, normalize_path
from .walker import WalkSummarizer

logger = logging.getLogger(__name__)


def default_summarizer(settings: ScanSettings) -> ChildSizeSummarizer:
    du = DuSummarizer()
    if du.available():
        return du
    return WalkSummarizer(max_workers=settings.walk_workers)


class Scanner:
    """Entry point: picks a strategy for a root path and returns its tree."""

    def __init__(self,
                 settings: Optional[ScanSettings] = None,
                 cache: Optional[FileCache] = None,
                 index_finder: Optional[LargeFileFinder] = None,
                 summarizer: Optional[ChildSizeSummarizer] = None):
        self.settings = settings or ScanSettings()
        self.cache = cache if cache is not None else shared_cache()
        self.index_finder = index_finder or SpotlightFinder(
            self.settings.index_hit_limit, self.settings.index_merge_limit)
        self.summarizer = summarizer or default_summarizer(self.settings)
        self.registry = CancelRegistry()

    def use_index(self) -> bool:
        return not self.settings.force_fallback and self.index_finder.available()

    def scan(self, path: str, sink: Optional[Sink] = None) -> FileNode:
        root = normalize_path(path, self.settings.home_dir())
        try:
            st = os.stat(root)
        except OSError as e:
            raise NotFoundError(f"Failed to read metadata for {root}: {e}") from e
        if not statmod.S_ISDIR(st.st_mode):
            raise NotFoundError(f"Path is not a directory: {root}")

        token = self.registry.register()
        session = ScanSession(
            root=root,
            token=token,
            emitter=Emitter(sink, self.settings.emit_interval),
            cache=self.cache,
            settings=self.settings,
        )
        strategy = IndexedScanner(self.index_finder) if self.use_index() else FallbackScanner(self.summarizer)
        logger.info("scan %d started: %s (%s)", token.scan_id, root, type(strategy).__name__)

        t0 = time.monotonic()
        try:
            tree = strategy.scan(session)
        except ScanError as e:
            logger.info("scan %d failed: %s", token.scan_id, e)
            raise
        finally:
            self.registry.release(token)
        logger.info("scan %d done in %.1fs: %s, %d children", token.scan_id,
                    time.monotonic() - t0, format_size(tree.size), len(tree.children))
        return tree

    def cancel(self, scan_id: Optional[int] = None) -> None:
        self.registry.cancel(scan_id)

    @property
    def current_scan_id(self) -> Optional[int]:
        token = self.registry.current
        return token.scan_id if token else None


_default: Optional[Scanner] = None


def default_scanner() -> Scanner:
    global _default
    if _default is None:
        _default = Scanner(ScanSettings.from_env())
    return _default


def scan_path(path: str, sink: Optional[Sink] = None) -> FileNode:
    return default_scanner().scan(path, sink)


def cancel_scan() -> None:
    default_scanner().cancel()
