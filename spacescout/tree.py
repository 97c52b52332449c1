from __future__ import annotations
import logging
import os
from typing import Dict, List, Mapping, Optional

from .config import MAX_ROOT_CHILDREN, PRUNE_MIN_COUNT, PRUNE_MIN_SIZE
from .models import FileNode
from .utils import depth, format_size, is_within, root_display_name

logger = logging.getLogger(__name__)


def add_to_ancestors(dir_sizes: Dict[str, int], file_path: str, size: int, root: str):
    "Add size to every directory from the file's parent up to and including root."
    cur = os.path.dirname(file_path)
    while True:
        if not is_within(cur, root):
            break
        dir_sizes[cur] = dir_sizes.get(cur, 0) + size
        if cur == root:
            break
        parent = os.path.dirname(cur)
        if parent == cur:
            break
        cur = parent


def _sort_desc(nodes: List[FileNode]):
    nodes.sort(key=lambda n: (-n.size, n.name))


def build_tree(files: Mapping[str, int],
               dir_sizes: Mapping[str, int],
               root: str,
               home: Optional[str] = None,
               max_children: int = MAX_ROOT_CHILDREN) -> FileNode:
    """Turn flat path->size maps into a root node.

    Only the first level below root is expanded: each child directory
    carries its aggregate size plus the files found directly inside it.
    """
    node = FileNode(name=root_display_name(root, home), path=root, is_dir=True,
                    size=sum(files.values()))

    by_parent: Dict[str, List[FileNode]] = {}
    for path, size in files.items():
        by_parent.setdefault(os.path.dirname(path), []).append(
            FileNode(name=os.path.basename(path), path=path, is_dir=False, size=size))

    dirs = [d for d, s in dir_sizes.items() if s > 0 and d != root]
    dirs.sort(key=lambda d: (depth(d), d))

    kids: List[FileNode] = []
    for d in dirs:
        if os.path.dirname(d) != root:
            continue
        sub = FileNode(name=os.path.basename(d), path=d, is_dir=True, size=dir_sizes[d],
                       children=by_parent.pop(d, []))
        _sort_desc(sub.children)
        kids.append(sub)

    kids.extend(by_parent.pop(root, []))
    _sort_desc(kids)
    del kids[max_children:]
    node.children = kids

    logger.debug("built tree for %s: %d children, %s", root, len(kids), format_size(node.size))
    return node


def prune_children(children: List[FileNode],
                   min_count: int = PRUNE_MIN_COUNT,
                   min_size: int = PRUNE_MIN_SIZE,
                   limit: int = MAX_ROOT_CHILDREN) -> List[FileNode]:
    "Sort by size; when crowded drop small files and keep the largest entries."
    out = sorted(children, key=lambda n: (-n.size, n.name))
    if len(out) > min_count:
        out = [c for c in out if c.is_dir or c.size >= min_size]
        del out[limit:]
    return out


def tree_from_cache(cached: Mapping[str, int], root: str, home: Optional[str] = None) -> FileNode:
    dir_sizes: Dict[str, int] = {}
    for path, size in cached.items():
        add_to_ancestors(dir_sizes, path, size, root)
    return build_tree(cached, dir_sizes, root, home)
