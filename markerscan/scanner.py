from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from rich.progress import Progress, TaskID

from .console import RichLogger
from .errors import NoSourcesError, UnreadableFileError
from .extractors import scan
from .input_sources import InputItem, ScanSource
from .models import Finding

DEFAULT_MAX_FILE_MB = 25


@dataclass(frozen=True)
class FileResult:
    source_id: str
    findings: Tuple[Finding, ...] = ()
    skipped: bool = False
    reason: str = ""


@dataclass
class ScanOutcome:
    findings: List[Finding] = field(default_factory=list)
    files_total: int = 0
    files_skipped: int = 0
    skipped: Dict[str, str] = field(default_factory=dict)

    @property
    def files_scanned(self) -> int:
        return self.files_total - self.files_skipped


class Scanner:
    def __init__(self, logger: RichLogger, max_file_mb: int = DEFAULT_MAX_FILE_MB):
        self.logger = logger
        self.max_file_bytes = max(1, max_file_mb) * 1024 * 1024

    def scan_source(self, source: ScanSource) -> FileResult:
        source_id = source.source_id
        if isinstance(source, InputItem):
            if source.size_bytes == 0:
                self.logger.debug(f"Empty file: {source_id}")
                return FileResult(source_id)
            if source.size_bytes > self.max_file_bytes:
                reason = f"too large ({source.size_bytes} bytes)"
                self.logger.warn(f"Skipping {reason} file: {source_id}")
                return FileResult(source_id, skipped=True, reason=reason)

        try:
            text = source.read_text()
        except UnreadableFileError as exc:
            self.logger.warn(f"Skipping unreadable file {source_id}: {exc.reason}")
            return FileResult(source_id, skipped=True, reason=exc.reason)

        findings = tuple(scan(text, source_id))
        if findings:
            self.logger.debug(f"Hit {source_id}: {len(findings)} marker(s)")
        return FileResult(source_id, findings)

    def scan_all(
        self,
        sources: Sequence[ScanSource],
        threads: int = 1,
        progress: Optional[Progress] = None,
        task_id: Optional[TaskID] = None,
    ) -> ScanOutcome:
        """Scan every source on a worker pool and merge results in input order."""
        if not sources:
            raise NoSourcesError()

        results: List[Optional[FileResult]] = [None] * len(sources)
        with ThreadPoolExecutor(max_workers=max(1, threads)) as executor:
            future_map = {executor.submit(self.scan_source, source): idx for idx, source in enumerate(sources)}
            for future in as_completed(future_map):
                idx = future_map[future]
                try:
                    results[idx] = future.result()
                except Exception as exc:
                    source_id = sources[idx].source_id
                    self.logger.warn(f"Failed to scan {source_id}: {exc}")
                    results[idx] = FileResult(source_id, skipped=True, reason=str(exc))
                if progress is not None and task_id is not None:
                    progress.advance(task_id)

        outcome = ScanOutcome(files_total=len(sources))
        for result in results:
            if result is None:
                continue
            if result.skipped:
                outcome.files_skipped += 1
                outcome.skipped[result.source_id] = result.reason
                continue
            outcome.findings.extend(result.findings)
        return outcome
