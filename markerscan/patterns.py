from __future__ import annotations

import re
from typing import Dict

from .models import MarkerKind

COMMENT_OPEN_PATTERN = r"(?://|/\*|#|<!--)"
COMMENT_CLOSE_PATTERN = r"(?:\*/|-->|$)"


def marker_pattern(keyword: str) -> re.Pattern[str]:
    # Only the keyword is case-insensitive; comment tokens are literal.
    return re.compile(
        rf"{COMMENT_OPEN_PATTERN}\s*(?i:{re.escape(keyword)}):?\s*(?P<annotation>.*?){COMMENT_CLOSE_PATTERN}"
    )


MARKER_RX: Dict[MarkerKind, re.Pattern[str]] = {kind: marker_pattern(kind.value) for kind in MarkerKind}
