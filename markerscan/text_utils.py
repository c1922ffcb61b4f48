from __future__ import annotations

import re
from typing import List

NEWLINE_RX = re.compile(r"\r\n?")


def trim_snippet(text: str, max_len: int = 240) -> str:
    value = text.strip()
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def normalize_newlines(text: str) -> str:
    if "\r" not in text:
        return text
    return NEWLINE_RX.sub("\n", text)


def split_lines(text: str) -> List[str]:
    return normalize_newlines(text).split("\n")
