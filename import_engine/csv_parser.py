"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Header whitespace stripping
  • Streaming rows from disk without loading the file
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, Optional, TextIO


def prepare_reader(stream: TextIO) -> Optional[csv.DictReader]:
    """
    Wrap an open text stream in a DictReader with cleaned headers.
    Returns None if the stream has no header row.
    """
    reader = csv.DictReader(stream)
    if reader.fieldnames is None:
        return None

    # Strip whitespace (and a leftover BOM) from every header
    reader.fieldnames = [h.strip().lstrip("\ufeff") for h in reader.fieldnames]
    return reader


def iter_rows(path: str | Path) -> Iterator[tuple[int, dict]]:
    """
    Yield (line, row) pairs lazily.  line is the physical line the
    record starts on (header = 1).  Missing cells come back as "".
    """
    with open(path, encoding="utf-8-sig", errors="replace", newline="") as fh:
        reader = prepare_reader(fh)
        if reader is None:
            return
        line = reader.line_num + 1
        for row in reader:
            yield line, _clean(row)
            line = reader.line_num + 1


def _clean(row: dict) -> dict:
    # Extra cells land under the None key; short rows give None values
    return {k: (v if v is not None else "") for k, v in row.items() if k is not None}
