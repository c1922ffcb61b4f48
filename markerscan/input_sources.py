from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .console import RichLogger
from .errors import UnreadableFileError

DEFAULT_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".tox",
    "dist",
    "build",
}


def detect_text_encoding(sample: bytes) -> str:
    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe") or sample.startswith(b"\xfe\xff"):
        return "utf-16"
    return "utf-8"


def is_likely_binary(sample: bytes) -> bool:
    if sample.startswith((b"\xff\xfe", b"\xfe\xff")):
        # UTF-16 text carries NUL bytes; the BOM says it is text.
        return False
    if b"\x00" in sample:
        return True
    if not sample:
        return False
    non_printable = 0
    for b in sample[:2048]:
        if b in (9, 10, 12, 13):
            continue
        if 32 <= b <= 126 or b >= 128:
            continue
        non_printable += 1
    return (non_printable / max(1, min(len(sample), 2048))) > 0.25


def decode_text(data: bytes, source_id: str) -> str:
    sample = data[:4096]
    if is_likely_binary(sample):
        raise UnreadableFileError(source_id, "binary content")
    return data.decode(detect_text_encoding(sample), errors="replace")


@dataclass(frozen=True)
class SourceText:
    source_id: str
    text: Union[str, bytes]

    def read_text(self) -> str:
        if isinstance(self.text, str):
            return self.text
        return decode_text(self.text, self.source_id)


@dataclass(frozen=True)
class InputItem:
    display_name: str
    size_bytes: int
    file_path: Path
    relative_path: Optional[str] = None

    @property
    def source_id(self) -> str:
        return self.display_name

    def read_bytes(self) -> bytes:
        with open(self.file_path, "rb") as f:
            return f.read()

    def read_text(self) -> str:
        try:
            data = self.read_bytes()
        except OSError as exc:
            raise UnreadableFileError(self.source_id, exc.strerror or str(exc)) from exc
        return decode_text(data, self.source_id)


ScanSource = Union[InputItem, SourceText]


def _relative_label(p: Path, root: Path) -> str:
    rel_path = os.path.relpath(p, root)
    if rel_path == os.pardir or rel_path.startswith(os.pardir + os.sep):
        return p.as_posix()
    return Path(rel_path).as_posix()


def _make_item(p: Path, root: Path) -> InputItem:
    st = p.stat()
    return InputItem(
        display_name=str(p),
        size_bytes=st.st_size,
        file_path=p,
        relative_path=_relative_label(p, root),
    )


def _walk_files(root: Path, follow_symlinks: bool, excluded: set[str]) -> Iterator[Path]:
    # Sorted so repeated runs report files in the same order.
    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            p = Path(dirpath) / filename
            if (not follow_symlinks) and p.is_symlink():
                continue
            yield p


def iter_input_items(
    input_paths: Iterable[Path],
    logger: RichLogger,
    follow_symlinks: bool = False,
    exclude_dirs: Optional[Iterable[str]] = None,
    file_root: Optional[Path] = None,
) -> Iterator[InputItem]:
    """Yield each readable file once, in argument order then walk order.

    Directories are walked recursively and labelled relative to themselves;
    plain file arguments are labelled relative to ``file_root`` (their own
    folder when not given).
    """
    excluded = set(DEFAULT_EXCLUDED_DIRS)
    if exclude_dirs:
        excluded.update(exclude_dirs)
    seen: set[Path] = set()

    for input_path in input_paths:
        if not input_path.exists():
            raise FileNotFoundError(str(input_path))

        if input_path.is_file():
            candidates = [input_path]
            root = file_root or input_path.parent
        else:
            candidates = _walk_files(input_path, follow_symlinks, excluded)
            root = input_path

        for p in candidates:
            try:
                key = p.resolve()
                if key in seen:
                    continue
                seen.add(key)
                yield _make_item(p, root)
            except OSError as e:
                logger.warn(f"Skipping unreadable path: {p} ({e})")
