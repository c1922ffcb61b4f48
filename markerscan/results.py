from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .models import Finding, MarkerKind
from .text_utils import trim_snippet

NO_ISSUES_MESSAGE = "No TODO, FIXME or BUG comments found."
DETAIL_TITLE = "Code Issues Report"
DETAIL_HINT = "Tip: jump to an entry with your editor's go-to-location using the path:line:column shown above."


class Report:
    """Findings grouped by marker kind.

    Kinds keep the order in which they were first seen and each group keeps
    the order its findings were added in.
    """

    def __init__(self):
        self._groups: Dict[MarkerKind, List[Finding]] = {}

    def add(self, finding: Finding) -> None:
        self._groups.setdefault(finding.kind, []).append(finding)

    def kinds(self) -> List[MarkerKind]:
        return list(self._groups.keys())

    def findings(self, kind: MarkerKind) -> List[Finding]:
        return list(self._groups.get(kind, []))

    def groups(self) -> Iterator[Tuple[MarkerKind, List[Finding]]]:
        for kind, items in self._groups.items():
            yield kind, list(items)

    def counts(self) -> Dict[MarkerKind, int]:
        return {kind: len(items) for kind, items in self._groups.items()}

    @property
    def total(self) -> int:
        return sum(len(items) for items in self._groups.values())


def aggregate(findings: Iterable[Finding]) -> Optional[Report]:
    """Group findings by kind; returns None when there is nothing to report."""
    report = Report()
    for finding in findings:
        report.add(finding)
    if report.total == 0:
        return None
    return report


def summarize(report: Optional[Report]) -> str:
    if report is None or report.total == 0:
        return NO_ISSUES_MESSAGE
    return ", ".join(f"{count} {kind.value}" for kind, count in report.counts().items())


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_detail(report: Optional[Report], label: Optional[Callable[[str], str]] = None) -> str:
    if report is None or report.total == 0:
        return NO_ISSUES_MESSAGE
    to_label = label or (lambda source_id: source_id)

    lines: List[str] = [DETAIL_TITLE, "=" * len(DETAIL_TITLE), ""]
    lines.append(f"Total: {_plural(report.total, 'issue')} ({summarize(report)})")
    lines.append("")
    for kind, items in report.groups():
        heading = f"{kind.value} ({len(items)})"
        lines.append(heading)
        lines.append("-" * len(heading))
        for finding in items:
            lines.append(f"{to_label(finding.source_id)}:{finding.line}:{finding.column}")
            lines.append(f"    {trim_snippet(finding.raw_line)}")
            if finding.annotation:
                lines.append(f"    -> {finding.annotation}")
        lines.append("")
    lines.append(DETAIL_HINT)
    return "\n".join(lines) + "\n"
