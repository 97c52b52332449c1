from __future__ import annotations


class ScanError(Exception):
    """Base class for errors that abort (or are raised inside) a scan."""


class NotFoundError(ScanError):
    pass


class ExternalToolError(ScanError):
    def __init__(self, tool: str, message: str):
        super().__init__(f"{tool}: {message}")
        self.tool = tool


class ParseError(ScanError):
    def __init__(self, line: str, message: str = "malformed line"):
        super().__init__(f"{message}: {line!r}")
        self.line = line


class CancelledError(ScanError):
    def __init__(self, message: str = "Scan cancelled"):
        super().__init__(message)
