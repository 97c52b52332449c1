from __future__ import annotations
import os
from typing import Optional

_UNITS = ["B", "KB", "MB", "GB", "TB"]

_MULTIPLIERS = {
    "": 1,
    "B": 1,
    "K": 1024, "KB": 1024,
    "M": 1024 ** 2, "MB": 1024 ** 2,
    "G": 1024 ** 3, "GB": 1024 ** 3,
    "T": 1024 ** 4, "TB": 1024 ** 4,
    "P": 1024 ** 5, "PB": 1024 ** 5,
}


def format_size(num: int) -> str:
    x = float(num)
    i = 0
    while x >= 1024.0 and i < len(_UNITS) - 1:
        x /= 1024.0
        i += 1
    return f"{x:.1f}{_UNITS[i]}"


def parse_human_size(text: str) -> int:
    """Parse sizes like "4.0K", "294M" or "3.5G" (binary units) into bytes.

    Unknown units count as bytes; anything without a leading number is 0.
    """
    s = (text or "").strip()
    end = 0
    while end < len(s) and (s[end].isdigit() or s[end] == "."):
        end += 1
    if end == 0:
        return 0
    try:
        number = float(s[:end])
    except ValueError:
        return 0
    mult = _MULTIPLIERS.get(s[end:].strip().upper(), 1)
    return int(round(number * mult))


def normalize_path(path: str, home: Optional[str] = None) -> str:
    home = home or os.path.expanduser("~")
    if path == "~":
        path = home
    elif path.startswith("~" + os.sep) or path.startswith("~/"):
        path = os.path.join(home, path[2:])
    elif path.startswith("~"):
        path = os.path.expanduser(path)
    path = os.path.abspath(path)
    if not is_fs_root(path):
        path = path.rstrip("\\/") or path
    return path


def is_fs_root(path: str) -> bool:
    return os.path.dirname(path) == path


def is_within(path: str, root: str) -> bool:
    "True if path equals root or lies below it (component-wise, not by prefix)."
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def depth(path: str) -> int:
    return len([p for p in path.split(os.sep) if p])


def root_display_name(root: str, home: Optional[str] = None) -> str:
    if is_fs_root(root):
        return "Root"
    home = home or os.path.expanduser("~")
    if root == home.rstrip("\\/"):
        return "Home"
    return os.path.basename(root) or "Root"
