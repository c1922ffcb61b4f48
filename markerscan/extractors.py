from __future__ import annotations

import re
from typing import Iterator, List

from .models import Finding, MarkerKind
from .patterns import MARKER_RX
from .text_utils import split_lines


def iter_line_matches(line: str, pattern: re.Pattern[str]) -> Iterator[re.Match[str]]:
    """Yield non-overlapping matches left to right, resuming after each match end."""
    pos = 0
    while pos <= len(line):
        match = pattern.search(line, pos)
        if match is None:
            return
        yield match
        # Every match consumes at least the opening token, so the cursor always advances.
        pos = match.end()


def extract_from_line(line: str, source_id: str, line_no: int) -> List[Finding]:
    findings: List[Finding] = []
    raw_line = line.strip()
    for kind in MarkerKind:
        for match in iter_line_matches(line, MARKER_RX[kind]):
            findings.append(
                Finding(
                    source_id=source_id,
                    line=line_no,
                    column=match.start() + 1,
                    kind=kind,
                    annotation=(match.group("annotation") or "").strip(),
                    raw_line=raw_line,
                )
            )
    return findings


def scan(text: str, source_id: str) -> List[Finding]:
    """Extract every marker comment from ``text``.

    Findings come back in line order, then in TODO/FIXME/BUG order within a
    line, then left to right. Markers inside string literals are reported too;
    the detector is pattern based and does not parse the host language.
    """
    findings: List[Finding] = []
    for idx, line in enumerate(split_lines(text), start=1):
        if not line:
            continue
        findings.extend(extract_from_line(line, source_id, idx))
    return findings
