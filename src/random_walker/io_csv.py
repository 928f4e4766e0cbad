"""CSV serialization of walk history."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from .session import HistoryEntry

CSV_FIELDS = ["step", "url", "label", "error"]


def trail_rows(history: Iterable[HistoryEntry]) -> list[dict[str, str]]:
    return [
        {
            "step": str(index),
            "url": entry.url,
            "label": entry.label or "",
            "error": entry.error,
        }
        for index, entry in enumerate(history)
    ]


def write_trail(path: str, history: Iterable[HistoryEntry]) -> None:
    """Write the walk history to CSV with a stable schema."""
    output_path = Path(path)
    with output_path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.DictWriter(file_obj, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(trail_rows(history))
