from __future__ import annotations


class MarkerScanError(Exception):
    pass


class UnreadableFileError(MarkerScanError):
    def __init__(self, source_id: str, reason: str):
        super().__init__(f"{source_id}: {reason}")
        self.source_id = source_id
        self.reason = reason


class NoSourcesError(MarkerScanError):
    def __init__(self, message: str = "Nothing to scan: no files were supplied."):
        super().__init__(message)
