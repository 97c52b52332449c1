from __future__ import annotations
import logging
import os
import shutil
import stat as statmod
import subprocess
import sys
from typing import List, Optional, Sequence, Tuple

from .config import INDEX_HIT_LIMIT, INDEX_MERGE_LIMIT, KB
from .errors import ExternalToolError, ParseError

logger = logging.getLogger(__name__)


def _run(tool: str, args: Sequence[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
    try:
        res = subprocess.run(list(args), cwd=cwd, capture_output=True, text=True,
                             errors="surrogateescape")
    except OSError as e:
        raise ExternalToolError(tool, f"failed to launch: {e}") from e
    if res.returncode < 0:
        raise ExternalToolError(tool, f"killed by signal {-res.returncode}")
    return res


class LargeFileFinder:
    """Finds files above a size threshold without walking the tree."""

    name = "index"

    def available(self) -> bool:
        raise NotImplementedError

    def find(self, root: str, min_size: int) -> List[Tuple[str, int]]:
        "Return (path, size) pairs sorted by size, largest first."
        raise NotImplementedError


class SpotlightFinder(LargeFileFinder):
    name = "mdfind"

    def __init__(self, hit_limit: int = INDEX_HIT_LIMIT, merge_limit: int = INDEX_MERGE_LIMIT):
        self.hit_limit = hit_limit
        self.merge_limit = merge_limit

    def available(self) -> bool:
        return sys.platform == "darwin" and shutil.which("mdfind") is not None

    def find(self, root: str, min_size: int) -> List[Tuple[str, int]]:
        res = _run(self.name, ["mdfind", "-onlyin", root, f"kMDItemFSSize > {int(min_size)}"])
        if res.returncode != 0:
            raise ExternalToolError(self.name, f"exit status {res.returncode}: {res.stderr.strip()}")
        hits = [ln for ln in res.stdout.splitlines() if ln.strip()][:self.hit_limit]
        logger.debug("mdfind > %d under %s: %d hits", min_size, root, len(hits))

        out: List[Tuple[str, int]] = []
        for p in hits:
            try:
                st = os.lstat(p)
            except OSError as e:
                logger.debug("skip %s: %s", p, e)
                continue
            if statmod.S_ISREG(st.st_mode):
                out.append((p, int(st.st_size)))
        out.sort(key=lambda x: x[1], reverse=True)
        return out[:self.merge_limit]


class ChildSizeSummarizer:
    """Reports the recursive size of each immediate child of a directory."""

    name = "summary"

    def available(self) -> bool:
        raise NotImplementedError

    def summarize(self, root: str, limit: int, cancel_flag=None) -> List[Tuple[str, int]]:
        "Return (name, size) pairs for root's children, largest first, at most limit."
        raise NotImplementedError


def visible_children(root: str) -> List[str]:
    with os.scandir(root) as it:
        return sorted(e.name for e in it if not e.name.startswith("."))


def parse_du_line(line: str) -> Tuple[str, int]:
    """Parse one ``du -sk`` line ("<kilobytes><tab><name>").

    The name keeps any leading blanks; plain whitespace separation is only
    accepted when the line has no tab.

    >>> parse_du_line("1024\\tfoo bar")
    ('foo bar', 1048576)
    """
    text = line.rstrip("\r\n").lstrip(" ")
    if "\t" in text:
        parts = text.split("\t", 1)
    else:
        parts = text.split(None, 1)
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1]:
        raise ParseError(line)
    name = parts[1]
    if name.startswith("./"):
        name = name[2:]
    return name, int(parts[0]) * KB


class DuSummarizer(ChildSizeSummarizer):
    name = "du"

    def available(self) -> bool:
        return shutil.which("du") is not None

    def summarize(self, root: str, limit: int, cancel_flag=None) -> List[Tuple[str, int]]:
        try:
            names = visible_children(root)
        except OSError as e:
            logger.warning("cannot list %s: %s", root, e)
            return []
        if not names:
            return []
        res = _run(self.name, ["du", "-sk", "--"] + names, cwd=root)
        if res.returncode != 0:
            # Usually permission errors somewhere below; the totals are still printed.
            logger.warning("du exited with status %d under %s", res.returncode, root)

        out: List[Tuple[str, int]] = []
        for line in res.stdout.splitlines():
            if not line.strip():
                continue
            try:
                out.append(parse_du_line(line))
            except ParseError as e:
                logger.debug("skip du output: %s", e)
        out.sort(key=lambda x: x[1], reverse=True)
        return out[:limit]
