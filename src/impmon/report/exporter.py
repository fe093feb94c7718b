"""
Session report export.

``export_report`` is a pure function of its inputs: the same samples,
markers and metadata always produce byte-identical text.
"""

import logging
import os

from collections.abc import Sequence
from datetime import date
from pathlib import Path

from impmon.constants import (
    CIRCUMFERENCE_UNIT,
    HEIGHT_UNIT,
    REPORT_DATA_HEADER,
    REPORT_EVENTS_HEADING,
    REPORT_FILENAME_PREFIX,
    REPORT_FILENAME_SUFFIX,
    WEIGHT_UNIT,
)
from impmon.models.metadata import ExportMetadata, Sex
from impmon.models.session import EventMarker, Sample

logger = logging.getLogger(__name__)


def _metadata_lines(metadata: ExportMetadata) -> list[str]:
    lines = [
        f"Name: {metadata.name}",
        f"Age: {metadata.age}",
        f"Sex: {metadata.sex.value}",
        f"Weight: {metadata.weight} {WEIGHT_UNIT}",
        f"Height: {metadata.height} {HEIGHT_UNIT}",
        f"Suprailiac circumference: {metadata.circumference} {CIRCUMFERENCE_UNIT}",
    ]
    if metadata.sex is Sex.FEMALE:
        lines.append(f"Last menstruation: {metadata.last_menstruation or ''}")
    return lines


def export_report(
    samples: Sequence[Sample],
    events: Sequence[EventMarker],
    metadata: ExportMetadata | None = None,
) -> str:
    """
    Render a session as the plain-text report.

    Layout:
        optional metadata block followed by a blank line,
        ``Time(s)<TAB>Value`` header and one line per sample,
        and, when markers exist, a blank line, ``Events:`` and one line per marker.

    Args:
        samples: Samples in log order
        events: Event markers in log order
        metadata: Subject metadata, or None to omit the block

    Returns:
        Report text, newline-terminated
    """
    lines: list[str] = []

    if metadata is not None:
        lines.extend(_metadata_lines(metadata))
        lines.append("")

    lines.append(REPORT_DATA_HEADER)
    # Negative zero prints as 0.000
    lines.extend(f"{s.elapsed_time:.2f}\t{s.value + 0.0:.3f}" for s in samples)

    if events:
        lines.append("")
        lines.append(REPORT_EVENTS_HEADING)
        lines.extend(
            f"Event {e.sequence_id}: {e.elapsed_time:.2f} seconds" for e in events
        )

    return "\n".join(lines) + "\n"


def report_filename(day: date | None = None) -> str:
    """
    Name of the report artifact for a given day.

    Args:
        day: Report date (default: today)

    Returns:
        e.g. ``measurements_2024-11-05.txt``
    """
    day = day or date.today()
    return f"{REPORT_FILENAME_PREFIX}{day.isoformat()}{REPORT_FILENAME_SUFFIX}"


def write_report(text: str, directory: Path | str, day: date | None = None) -> Path:
    """
    Write report text to ``directory`` as UTF-8, replacing any same-day report.

    Uses temp file + rename so a partially written report is never left behind.

    Args:
        text: Report text from export_report
        directory: Output directory (created if missing)
        day: Report date used for the filename (default: today)

    Returns:
        Path of the written report
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    output_path = directory / report_filename(day)
    temp_path = output_path.with_suffix(".txt.tmp")

    try:
        with open(temp_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(temp_path, output_path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise

    logger.info(f"Report written to {output_path}")
    return output_path
