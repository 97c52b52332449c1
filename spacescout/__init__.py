from .cache import FileCache, shared_cache
from .config import ScanSettings
from .errors import CancelledError, ExternalToolError, NotFoundError, ParseError, ScanError
from .models import CachedFile, DiskInfo, FileNode, ScanProgress
from .scanner import Scanner, cancel_scan, scan_path
from .utils import format_size, parse_human_size

__all__ = (
    "Scanner", "scan_path", "cancel_scan",
    "ScanSettings", "FileCache", "shared_cache",
    "FileNode", "ScanProgress", "CachedFile", "DiskInfo",
    "ScanError", "NotFoundError", "ExternalToolError", "ParseError", "CancelledError",
    "format_size", "parse_human_size",
)
