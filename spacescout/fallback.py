from __future__ import annotations
import logging
import os
import stat as statmod
from typing import List

from .finders import ChildSizeSummarizer
from .models import FileNode
from .session import ScanSession
from .tree import prune_children
from .utils import format_size, is_within, root_display_name

logger = logging.getLogger(__name__)


class FallbackScanner:
    """One level deep scan: summarizer sizes for root's children, raw listing as last resort."""

    def __init__(self, summarizer: ChildSizeSummarizer):
        self.summarizer = summarizer

    def scan(self, session: ScanSession) -> FileNode:
        root = session.root
        logger.info("fallback scan of %s (%s)", root, self.summarizer.name)

        seeds = self._cached_children(session)
        found = self._summarize(session)
        if not found:
            logger.warning("%s returned nothing for %s, listing entries", self.summarizer.name, root)
            session.emitter.progress("Listing directory entries...")
            found = self._list_entries(session)

        children = [s for s in seeds if not self._covered(s, found)] + found
        total = sum(c.size for c in children)
        settings = session.settings
        children = prune_children(children, settings.prune_min_count,
                                  settings.prune_min_size, settings.max_root_children)
        logger.info("fallback scan done: %d items, %s", len(children), format_size(total))
        return FileNode(name=root_display_name(root, session.home), path=root,
                        is_dir=True, size=total, children=children)

    def _cached_children(self, session: ScanSession) -> List[FileNode]:
        out = []
        for path, size in session.cache.query(session.root).items():
            out.append(FileNode(name=os.path.basename(path), path=path,
                                is_dir=os.path.isdir(path), size=size))
        return out

    @staticmethod
    def _covered(seed: FileNode, found: List[FileNode]) -> bool:
        for f in found:
            if seed.path == f.path or (f.is_dir and is_within(seed.path, f.path)):
                return True
        return False

    def _summarize(self, session: ScanSession) -> List[FileNode]:
        root = session.root
        em = session.emitter
        every = max(1, session.settings.summary_progress_every)
        session.emitter.progress(f"Measuring {root} with {self.summarizer.name}...")
        entries = self.summarizer.summarize(root, session.settings.summary_limit,
                                            cancel_flag=session.token)
        out: List[FileNode] = []
        for idx, (name, size) in enumerate(entries):
            session.check_cancel(self.summarizer.name)
            full = os.path.join(root, name)
            out.append(FileNode(name=name, path=full, is_dir=os.path.isdir(full), size=size))
            em.add_items(1)
            if idx % every == 0:
                em.progress(f"{self.summarizer.name} scan: found {idx + 1} items")
        return out

    def _list_entries(self, session: ScanSession) -> List[FileNode]:
        root = session.root
        em = session.emitter
        placeholder = session.settings.dir_placeholder_size
        out: List[FileNode] = []
        try:
            it = os.scandir(root)
        except OSError as e:
            logger.warning("cannot list %s: %s", root, e)
            return out
        with it:
            for entry in it:
                session.check_cancel("listing")
                if entry.name.startswith("."):
                    continue
                try:
                    st = entry.stat()
                except OSError as e:
                    logger.debug("skip %s: %s", entry.path, e)
                    continue
                is_dir = statmod.S_ISDIR(st.st_mode)
                # Directories are not recursed here; the placeholder stands in for their size.
                size = placeholder if is_dir else int(st.st_size)
                out.append(FileNode(name=entry.name, path=entry.path, is_dir=is_dir, size=size))
                em.add_items(1)
                em.progress(f"listing: found {len(out)} items")
        return out
