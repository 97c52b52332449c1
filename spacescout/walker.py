from __future__ import annotations
import logging
import os
import stat as statmod
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Tuple

from .config import WALK_WORKERS
from .errors import CancelledError
from .finders import ChildSizeSummarizer, visible_children

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class _Total:
    def __init__(self):
        self._lock = threading.Lock()
        self.value = 0

    def add(self, n: int):
        with self._lock:
            self.value += n


def _scan_one(dir_path: str, total: _Total) -> List[str]:
    "Add the sizes of regular files in dir_path to total, return its subdirectories."
    subdirs: List[str] = []
    local = 0
    try:
        with os.scandir(dir_path) as it:
            for entry in it:
                try:
                    st = entry.stat(follow_symlinks=False)
                except OSError:
                    continue
                if statmod.S_ISDIR(st.st_mode):
                    subdirs.append(entry.path)
                elif statmod.S_ISREG(st.st_mode):
                    local += int(st.st_size)
    except OSError as e:
        logger.debug("skip %s: %s", dir_path, e)
    total.add(local)
    return subdirs


def directory_size(path: str, cancel_flag: Optional[CancelCheck] = None,
                   max_workers: int = WALK_WORKERS) -> int:
    """Exact recursive size of regular files below path.

    Directories are fanned out over a bounded thread pool; symlinks are not
    followed and unreadable entries are skipped.
    """
    total = _Total()
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        pending = {pool.submit(_scan_one, path, total)}
        try:
            while pending:
                if cancel_flag and cancel_flag():
                    raise CancelledError()
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    for sub in fut.result():
                        pending.add(pool.submit(_scan_one, sub, total))
        except CancelledError:
            for fut in pending:
                fut.cancel()
            raise
    return total.value


class WalkSummarizer(ChildSizeSummarizer):
    """Native replacement for ``du`` built on directory_size()."""

    name = "walk"

    def __init__(self, max_workers: int = WALK_WORKERS):
        self.max_workers = max_workers

    def available(self) -> bool:
        return True

    def summarize(self, root: str, limit: int, cancel_flag=None) -> List[Tuple[str, int]]:
        try:
            names = visible_children(root)
        except OSError as e:
            logger.warning("cannot list %s: %s", root, e)
            return []
        out: List[Tuple[str, int]] = []
        for name in names:
            full = os.path.join(root, name)
            try:
                st = os.lstat(full)
            except OSError as e:
                logger.debug("skip %s: %s", full, e)
                continue
            if statmod.S_ISDIR(st.st_mode):
                size = directory_size(full, cancel_flag, self.max_workers)
            else:
                size = int(st.st_size)
            out.append((name, size))
        out.sort(key=lambda x: x[1], reverse=True)
        return out[:limit]
