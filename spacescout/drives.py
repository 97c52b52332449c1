from __future__ import annotations
import logging
import os
from typing import List, Optional

import psutil

from .models import DiskInfo
from .utils import is_within

logger = logging.getLogger(__name__)


def list_disks(all_partitions: bool = False) -> List[DiskInfo]:
    disks = []
    seen = set()
    for p in psutil.disk_partitions(all=all_partitions):
        mp = p.mountpoint
        if not mp:
            continue
        mp_norm = os.path.abspath(mp)
        if mp_norm in seen:
            continue
        seen.add(mp_norm)
        try:
            u = psutil.disk_usage(mp_norm)
        except OSError as e:
            logger.debug("skip %s: %s", mp_norm, e)
            continue
        disks.append(DiskInfo(
            name=os.path.basename(mp_norm.rstrip("\\/")) or p.device or mp_norm,
            path=p.device,
            total=int(u.total),
            free=int(u.free),
            mount_point=mp_norm,
        ))
    disks.sort(key=lambda d: d.mount_point.lower())
    return disks


def disk_for_path(path: str, disks: Optional[List[DiskInfo]] = None) -> Optional[DiskInfo]:
    "The volume whose mount point is the longest prefix of path."
    ap = os.path.abspath(path)
    best = None
    for d in disks if disks is not None else list_disks():
        if is_within(ap, d.mount_point) and (best is None or len(d.mount_point) > len(best.mount_point)):
            best = d
    return best
