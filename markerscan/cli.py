from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn, TimeRemainingColumn
from rich.table import Table

from .console import RichLogger
from .errors import NoSourcesError
from .input_sources import InputItem, iter_input_items
from .results import Report, aggregate, format_detail, summarize
from .scanner import DEFAULT_MAX_FILE_MB, ScanOutcome, Scanner


def default_thread_count() -> int:
    return min(32, (os.cpu_count() or 4) + 4)


def _resolve_threads(explicit: int | None) -> int:
    if explicit is not None:
        return max(1, explicit)
    value = os.environ.get("MARKERSCAN_THREADS", "").strip()
    if value:
        try:
            return max(1, int(value))
        except ValueError:
            pass
    return default_thread_count()


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Worker threads for scanning (default: MARKERSCAN_THREADS or auto).",
    )
    parser.add_argument(
        "--max-file-mb",
        type=int,
        default=DEFAULT_MAX_FILE_MB,
        help=f"Skip files larger than this many MB (default: {DEFAULT_MAX_FILE_MB}).",
    )
    parser.add_argument(
        "--exclude-dir",
        action="append",
        default=[],
        help="Directory name to skip while walking (repeatable, added to the defaults).",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links while walking directories.",
    )
    parser.add_argument(
        "--detail",
        action="store_true",
        help="Print the full report listing every marker location.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="markerscan",
        description="Find TODO, FIXME and BUG comments in source files.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    ws = sub.add_parser(
        "workspace",
        help="Scan every file below a workspace root.",
    )
    ws.add_argument("root", nargs="?", default=".", help="Workspace root folder (default: current directory).")
    _add_common_arguments(ws)

    fl = sub.add_parser(
        "file",
        help="Scan only the given file(s).",
    )
    fl.add_argument("paths", nargs="+", help="File(s) to scan.")
    _add_common_arguments(fl)

    return ap


def _scan_items(
    items: List[InputItem],
    scanner: Scanner,
    threads: int,
    console: Console,
) -> ScanOutcome:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]Scanning files"),
        BarColumn(bar_width=None),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    )
    with progress:
        task_id = progress.add_task("scan", total=len(items))
        return scanner.scan_all(items, threads=threads, progress=progress, task_id=task_id)


def _print_summary(console: Console, report: Optional[Report], outcome: ScanOutcome) -> None:
    table = Table(title="Findings Summary", header_style="bold")
    table.add_column("Marker", style="cyan")
    table.add_column("Count", justify="right")
    if report is not None:
        for kind, count in report.counts().items():
            table.add_row(kind.value, str(count))
    table.add_row("Files scanned", str(outcome.files_scanned), style="dim")
    if outcome.files_skipped:
        table.add_row("Files skipped", str(outcome.files_skipped), style="yellow")
    console.print(table)


def run_scan(
    paths: Sequence[Path],
    args,
    console: Optional[Console] = None,
    file_root: Optional[Path] = None,
) -> int:
    console = console or Console()
    logger = RichLogger(console=Console(stderr=True), verbose=args.verbose)

    try:
        items = list(
            iter_input_items(
                paths,
                logger,
                follow_symlinks=args.follow_symlinks,
                exclude_dirs=args.exclude_dir,
                file_root=file_root,
            )
        )
    except FileNotFoundError as exc:
        logger.error(f"Path not found: {exc}")
        return 2

    threads = _resolve_threads(args.threads)
    scanner = Scanner(logger=logger, max_file_mb=args.max_file_mb)
    logger.debug(f"Scanning {len(items)} file(s) with {threads} thread(s)")

    try:
        outcome = _scan_items(items, scanner, threads, console)
    except NoSourcesError as exc:
        logger.error(str(exc))
        return 2

    report = aggregate(outcome.findings)
    _print_summary(console, report, outcome)
    console.print(summarize(report), markup=False, highlight=False)
    if args.detail and report is not None:
        labels: Dict[str, str] = {item.source_id: item.relative_path or item.source_id for item in items}
        detail = format_detail(report, label=lambda source_id: labels.get(source_id, source_id))
        console.print(detail, markup=False, highlight=False)
    logger.done(
        f"Scanned {outcome.files_scanned} of {outcome.files_total} file(s), {logger.warnings} warning(s)"
    )
    return 0


def run_workspace(args, console: Optional[Console] = None) -> int:
    root = Path(args.root).expanduser()
    return run_scan([root], args, console=console)


def run_file(args, console: Optional[Console] = None) -> int:
    paths = [Path(p).expanduser() for p in args.paths]
    return run_scan(paths, args, console=console, file_root=Path.cwd())


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.command == "workspace":
        return run_workspace(args)
    if args.command == "file":
        return run_file(args)
    return 2
