from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MarkerKind(str, Enum):
    TODO = "TODO"
    FIXME = "FIXME"
    BUG = "BUG"


@dataclass(frozen=True)
class Finding:
    source_id: str
    line: int
    column: int
    kind: MarkerKind
    annotation: str
    raw_line: str
