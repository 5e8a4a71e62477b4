"""Read tabular sources (CSV or workbook) into rows of named fields."""

from __future__ import annotations

import csv
import logging
import math
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd


logger = logging.getLogger(__name__)

Row = Dict[str, Any]

CSV_SUFFIXES = {".csv"}
WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


class SourceLoadError(RuntimeError):
    """Raised when a tabular source is missing or malformed."""

    def __init__(self, source: str, path: Path, message: str):
        super().__init__(f"{source} source {path}: {message}")
        self.source = source
        self.path = path


def _read_csv_rows(path: Path) -> tuple[List[Row], List[str]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = [dict(row) for row in reader]
        columns = [name.strip() for name in (reader.fieldnames or [])]
    stripped = [{(key or "").strip(): value for key, value in row.items()} for row in rows]
    return stripped, columns


def _read_workbook_rows(path: Path) -> tuple[List[Row], List[str]]:
    # First sheet only; extra sheets are ignored.
    frame = pd.read_excel(path, sheet_name=0)
    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records"), list(frame.columns)


def read_table(
    path: Path,
    *,
    source: str = "tabular",
    required_columns: Sequence[str] = (),
) -> List[Row]:
    """Return rows from ``path`` as dictionaries keyed by column name.

    CSV files go through :mod:`csv`; workbooks are parsed with pandas. A
    source with rows but without one of ``required_columns`` is rejected.
    """

    path = Path(path)
    if not path.exists():
        raise SourceLoadError(source, path, "file does not exist")

    suffix = path.suffix.lower()
    try:
        if suffix in CSV_SUFFIXES:
            rows, columns = _read_csv_rows(path)
        elif suffix in WORKBOOK_SUFFIXES:
            rows, columns = _read_workbook_rows(path)
        else:
            raise SourceLoadError(source, path, f"unsupported file type {suffix or '(none)'!r}")
    except SourceLoadError:
        raise
    except (
        OSError,
        UnicodeDecodeError,
        csv.Error,
        ValueError,
        ImportError,
        zipfile.BadZipFile,
    ) as exc:
        raise SourceLoadError(source, path, f"unable to parse ({exc})") from exc

    if rows:
        missing = [column for column in required_columns if column not in columns]
        if missing:
            raise SourceLoadError(
                source,
                path,
                f"missing required columns {missing}; available columns: {columns}",
            )

    logger.debug("Read %s rows from %s source %s", len(rows), source, path)
    return rows


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False
