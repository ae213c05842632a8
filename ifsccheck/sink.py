"""
sink.py - Output Workbook
=========================
The Excel workbook results are recorded in (columns IFSC, BANK, BRANCH,
STATUS on a "Results" sheet).

Rows are kept in memory and the whole workbook is rewritten on every
update. All writes go through one lock, so the console loop and the HTTP
endpoint can share a sink without losing each other's rows.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd
from openpyxl.styles import PatternFill

from .models import CodeRecord, Status


logger = logging.getLogger(__name__)

COLUMNS = ['IFSC', 'BANK', 'BRANCH', 'STATUS']
SHEET_NAME = 'Results'

# Red fill for the BANK cell of invalid codes
INVALID_FILL = PatternFill("solid", fgColor="FF0000")


def _rows_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df = df.reindex(columns=COLUMNS)
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict('records')


class ResultSink:
    """
    Usage:
        sink = ResultSink(Path("output.xlsx"))
        sink.append(record)          # one manual / API result
        sink.write_all(records)      # a whole bulk run
        rows = sink.read_all()       # what is on disk now
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._rows: List[Dict[str, Any]] = []

        # Continue the history of an earlier run
        if self.path.exists():
            self._rows = self._read()
            logger.debug(f"Loaded {len(self._rows)} existing rows from {self.path}")

    def __len__(self):
        with self._lock:
            return len(self._rows)

    def append(self, record: CodeRecord):
        """Add one record and rewrite the workbook; nothing is kept if the write fails."""
        with self._lock:
            rows = self._rows + [record.to_row()]
            self._save(rows)
            self._rows = rows

    def write_all(self, records: Iterable[CodeRecord]):
        """Replace the workbook contents with `records`, in order."""
        with self._lock:
            rows = [r.to_row() for r in records]
            self._save(rows)
            self._rows = rows

    def read_all(self) -> List[Dict[str, Any]]:
        """Read the persisted rows back from disk (empty if nothing was written yet)."""
        with self._lock:
            if not self.path.exists():
                return []
            return self._read()

    def _read(self) -> List[Dict[str, Any]]:
        df = pd.read_excel(self.path, sheet_name=0, dtype=str)
        return _rows_from_frame(df)

    def _save(self, rows: List[Dict[str, Any]]):
        df = pd.DataFrame(rows, columns=COLUMNS)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(self.path, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
            ws = writer.sheets[SHEET_NAME]
            bank_col = COLUMNS.index('BANK') + 1
            # Row 1 is the header
            for i, row in enumerate(rows, start=2):
                if row.get('STATUS') == Status.INVALID.value:
                    ws.cell(row=i, column=bank_col).fill = INVALID_FILL
