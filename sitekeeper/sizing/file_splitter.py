"""Mechanical split of an oversized file on its suggested boundaries.

The original file is never modified. A timestamped backup is written next
to it, then one part file per segment.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path

from sitekeeper.consts import SIZE_ERROR_LINES
from sitekeeper.models.common import _utc_now
from sitekeeper.models.model_size import SizeClass, SizeReport, SplitResult
from sitekeeper.storage.file_manager import atomic_write_text

logger = logging.getLogger(__name__)


def backup_path_for(file_path: Path, now: datetime) -> Path:
    """'<file>.backup.<YYYYMMDDTHHMMSS>' next to the original."""
    return file_path.with_name(f"{file_path.name}.backup.{now.strftime('%Y%m%dT%H%M%S')}")


def part_path_for(file_path: Path, number: int) -> Path:
    """'<stem>-part<N><suffix>' next to the original."""
    return file_path.with_name(f"{file_path.stem}-part{number}{file_path.suffix}")


def split_lines(lines: list[str], cut_lines: list[int]) -> list[list[str]]:
    """Cut a file into segments, each cut line starting a new segment.

    Args:
        lines: File contents split on '\\n'.
        cut_lines: 1-based line numbers where new segments start.

    Returns:
        Segments covering every line exactly once, in order.
    """
    segments = []
    start = 0
    for cut in sorted(set(cut_lines)):
        index = cut - 1
        if start < index < len(lines):
            segments.append(lines[start:index])
            start = index
    segments.append(lines[start:])
    return segments


def split_file(site_root: Path, report: SizeReport, now: datetime | None = None) -> SplitResult:
    """Back up a file and write its parts.

    Args:
        site_root: Site root directory.
        report: Size report of the file, with split suggestions.
        now: Timestamp for the backup name (defaults to now).

    Returns:
        SplitResult naming the backup and the part files.

    Raises:
        ValueError: If the file is not over the error threshold, or sits
            exactly at it so that no split point exists.
    """
    if report.classification != SizeClass.ERROR:
        raise ValueError(f"{report.path} is within its line budget, nothing to split")
    if not report.suggestions:
        raise ValueError(
            f"{report.path} has {report.lines} lines, exactly at the {SIZE_ERROR_LINES}-line "
            "limit; no split point exists"
        )

    now = now or _utc_now()
    file_path = site_root / report.path
    text = file_path.read_text(encoding="utf-8")

    backup = backup_path_for(file_path, now)
    shutil.copy2(file_path, backup)
    logger.info(f"Backed up {file_path} to {backup}")

    segments = split_lines(text.split("\n"), [s.line for s in report.suggestions])
    parts = []
    for number, segment in enumerate(segments, start=1):
        part_path = part_path_for(file_path, number)
        atomic_write_text(part_path, "\n".join(segment))
        parts.append(part_path.relative_to(site_root).as_posix())
        logger.info(f"Wrote {part_path} ({len(segment)} lines)")

    return SplitResult(
        source=report.path,
        backup=backup.relative_to(site_root).as_posix(),
        parts=parts,
    )
