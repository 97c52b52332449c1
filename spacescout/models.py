from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class FileNode:
    name: str
    path: str
    is_dir: bool
    size: int = 0
    # An empty list means "leaf or pruned"; the size stays the true aggregate.
    children: List["FileNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "isDir": self.is_dir,
            "children": [c.to_dict() for c in self.children] or None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileNode":
        return cls(
            name=data["name"],
            path=data["path"],
            is_dir=bool(data["isDir"]),
            size=int(data["size"]),
            children=[cls.from_dict(c) for c in (data.get("children") or [])],
        )

    def walk(self):
        yield self
        for c in self.children:
            yield from c.walk()


@dataclass
class ScanProgress:
    current_path: str
    items_processed: int

    def to_dict(self) -> Dict[str, Any]:
        return {"current_path": self.current_path, "items_processed": self.items_processed}


@dataclass
class CachedFile:
    path: str
    size: int


@dataclass
class DiskInfo:
    name: str
    path: str
    total: int
    free: int
    mount_point: str

    @property
    def used(self) -> int:
        return max(0, self.total - self.free)
