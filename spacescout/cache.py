from __future__ import annotations
import logging
import threading
from typing import Dict, Iterable, List, Mapping, Union

from .config import CACHE_CAPACITY
from .models import CachedFile
from .utils import is_within

logger = logging.getLogger(__name__)


class FileCache:
    """Largest files seen by earlier scans, used only to seed previews."""

    def __init__(self, capacity: int = CACHE_CAPACITY):
        self.capacity = capacity
        self._lock = threading.Lock()
        self._entries: List[CachedFile] = []

    def add(self, files: Union[Mapping[str, int], Iterable[CachedFile]]) -> None:
        if isinstance(files, Mapping):
            batch = [CachedFile(p, int(s)) for p, s in files.items()]
        else:
            batch = list(files)
        with self._lock:
            merged: Dict[str, int] = {e.path: e.size for e in self._entries}
            for f in batch:
                merged[f.path] = f.size
            entries = [CachedFile(p, s) for p, s in merged.items()]
            entries.sort(key=lambda e: (-e.size, e.path))
            del entries[self.capacity:]
            self._entries = entries
            n = len(entries)
        logger.debug("cache updated with %d files (%d cached)", len(batch), n)

    def query(self, target: str) -> Dict[str, int]:
        with self._lock:
            found = {e.path: e.size for e in self._entries
                     if e.path != target and is_within(e.path, target)}
        if found:
            logger.debug("cache has %d files under %s", len(found), target)
        return found

    def entries(self) -> List[CachedFile]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_shared = FileCache()


def shared_cache() -> FileCache:
    return _shared
