from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

KB = 1024
MB = 1024 * KB

# Indexed search passes, largest first.
DEFAULT_THRESHOLDS: Tuple[int, ...] = (100 * MB, 50 * MB, 10 * MB, 5 * MB)
INDEX_HIT_LIMIT = 2000
INDEX_MERGE_LIMIT = 1000
PREVIEW_MIN_FILES = 10

EMIT_INTERVAL = 0.10  # seconds between progress events
CACHE_CAPACITY = 1000

SUMMARY_LIMIT = 100
SUMMARY_PROGRESS_EVERY = 5
DIR_PLACEHOLDER_SIZE = 1 * MB

MAX_ROOT_CHILDREN = 100
PRUNE_MIN_COUNT = 50
PRUNE_MIN_SIZE = 1 * MB

WALK_WORKERS = 8

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class ScanSettings:
    thresholds: Tuple[int, ...] = DEFAULT_THRESHOLDS
    index_hit_limit: int = INDEX_HIT_LIMIT
    index_merge_limit: int = INDEX_MERGE_LIMIT
    preview_min_files: int = PREVIEW_MIN_FILES
    emit_interval: float = EMIT_INTERVAL
    summary_limit: int = SUMMARY_LIMIT
    summary_progress_every: int = SUMMARY_PROGRESS_EVERY
    dir_placeholder_size: int = DIR_PLACEHOLDER_SIZE
    max_root_children: int = MAX_ROOT_CHILDREN
    prune_min_count: int = PRUNE_MIN_COUNT
    prune_min_size: int = PRUNE_MIN_SIZE
    walk_workers: int = WALK_WORKERS
    force_fallback: bool = False
    home: Optional[str] = field(default=None)

    def __post_init__(self):
        self.thresholds = tuple(int(t) for t in self.thresholds)
        if not self.thresholds:
            raise ValueError("at least one size threshold is required")
        for a, b in zip(self.thresholds, self.thresholds[1:]):
            if b >= a:
                raise ValueError(f"thresholds must be strictly decreasing: {self.thresholds}")
        if self.thresholds[-1] < 0:
            raise ValueError("thresholds must be non-negative")

    def home_dir(self) -> str:
        return self.home or os.path.expanduser("~")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ScanSettings":
        """Build settings from SPACESCOUT_* environment variables.

        SPACESCOUT_THRESHOLDS    comma separated sizes, e.g. "100M,50M,5M"
        SPACESCOUT_EMIT_INTERVAL seconds between progress events
        SPACESCOUT_FORCE_FALLBACK  skip indexed search when set to 1/true/yes
        """
        from .utils import parse_human_size

        env = os.environ if environ is None else environ
        kwargs = {}
        raw = env.get("SPACESCOUT_THRESHOLDS", "").strip()
        if raw:
            kwargs["thresholds"] = tuple(parse_human_size(p) for p in raw.split(",") if p.strip())
        raw = env.get("SPACESCOUT_EMIT_INTERVAL", "").strip()
        if raw:
            kwargs["emit_interval"] = float(raw)
        raw = env.get("SPACESCOUT_FORCE_FALLBACK", "").strip().lower()
        if raw:
            kwargs["force_fallback"] = raw in _TRUE
        kwargs.update(overrides)
        return cls(**kwargs)
