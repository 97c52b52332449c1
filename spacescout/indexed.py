from __future__ import annotations
import logging
from typing import Dict

from .finders import LargeFileFinder
from .models import FileNode
from .session import ScanSession
from .tree import add_to_ancestors, build_tree, tree_from_cache
from .utils import format_size, is_within

logger = logging.getLogger(__name__)


def _threshold_name(size: int) -> str:
    return format_size(size).replace(".0", "")


class IndexedScanner:
    """Largest-first discovery through an OS content index.

    Each pass asks the finder for files above a smaller threshold, so the
    biggest consumers show up first. Files below the last threshold are
    never enumerated: directory sizes are lower bounds.
    """

    def __init__(self, finder: LargeFileFinder):
        self.finder = finder

    def scan(self, session: ScanSession) -> FileNode:
        root = session.root
        em = session.emitter
        settings = session.settings
        thresholds = settings.thresholds
        logger.info("indexed scan of %s (%d passes, %s)", root, len(thresholds), self.finder.name)

        self._emit_cached_preview(session)

        files: Dict[str, int] = {}
        dir_sizes: Dict[str, int] = {}
        n = len(thresholds)
        for i, threshold in enumerate(thresholds, 1):
            session.check_cancel(f"pass {i}")
            label = _threshold_name(threshold)
            em.progress(f"index pass {i}/{n}: finding files larger than {label}")

            hits = self.finder.find(root, threshold)
            before = len(files)
            for path, size in hits:
                if path in files or path == root or not is_within(path, root):
                    continue
                files[path] = size
                add_to_ancestors(dir_sizes, path, size, root)
            added = len(files) - before

            em.set_items(len(files))
            em.progress(f"index: found {len(files)} large files ({added} new in pass {i}/{n})")
            logger.debug("pass %d (> %s): %d hits, %d new, %d total", i, label, len(hits), added, len(files))

            if len(files) > settings.preview_min_files:
                em.intermediate(build_tree(files, dir_sizes, root, session.home,
                                           settings.max_root_children))

        em.progress(f"index complete: {len(files)} files found, building tree")
        session.cache.add(files)
        return build_tree(files, dir_sizes, root, session.home, settings.max_root_children)

    def _emit_cached_preview(self, session: ScanSession):
        cached = session.cache.query(session.root)
        if not cached:
            return
        logger.debug("emitting cached preview with %d files", len(cached))
        session.emitter.intermediate(tree_from_cache(cached, session.root, session.home))
