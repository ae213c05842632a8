"""
processor.py - Bulk Row Processing
==================================
Runs every input row through validate -> enrich -> record:

1. Validate the code (through the cache)
2. Valid: fetch bank/branch (through the cache) -> VALID record
   Invalid: no lookup -> INVALID record ("Invalid IFSC", red in the sink)
3. Report progress every `progress_every` rows
4. Write all records to the sink in one batch and log the summary

A failed lookup is logged and the row keeps going with empty bank/branch;
it never stops the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List

from .cache import ResultCache
from .errors import LookupFailure
from .loader import CODE_COLUMN
from .models import CodeRecord, Status
from .sink import ResultSink
from .validator import normalize_code


logger = logging.getLogger(__name__)

BAR_BLOCK = "█"


@dataclass
class ProgressUpdate:
    processed: int
    total: int

    # One block to start with, one more per `progress_every` rows
    bar: str = BAR_BLOCK


@dataclass
class ProcessSummary:
    total: int = 0
    valid: int = 0
    failed: int = 0
    records: List[CodeRecord] = field(default_factory=list)

    @property
    def invalid(self) -> int:
        return self.total - self.valid


def log_progress(update: ProgressUpdate):
    logger.info(f"{update.bar} Processed {update.processed} out of {update.total}")


def resolve_code(cache: ResultCache, raw: Any) -> CodeRecord:
    """
    Validate and enrich a single code.

    Raises:
        LookupFailure: The code is valid but the directory lookup failed
    """
    code = normalize_code(raw)
    if not cache.get_or_validate(raw):
        return CodeRecord(code, None, None, Status.INVALID)

    details = cache.get_or_fetch(code)
    return CodeRecord(code, details.bank, details.branch, Status.VALID)


def process_rows(
    rows: Iterable[Dict[str, Any]],
    cache: ResultCache,
    sink: ResultSink,
    progress_every: int = 20,
    on_progress: Callable[[ProgressUpdate], None] | None = None,
) -> ProcessSummary:
    """
    Process input rows in order and record the results.

    Args:
        rows: Rows from load_input_data(); the code is read from the IFSC column
        cache: Shared per-run cache (validation + lookups)
        sink: Where the finished result set is written
        progress_every: Progress cadence in rows
        on_progress: Progress callback (default: a log line with a bar)

    Returns:
        ProcessSummary with counters and the records in input order

    Raises:
        ValueError: If progress_every is less than 1
    """
    if progress_every < 1:
        raise ValueError(f"progress_every must be at least 1, got {progress_every}")

    rows = list(rows)
    report = on_progress or log_progress
    summary = ProcessSummary()
    bar = BAR_BLOCK

    try:
        for row in rows:
            raw = row.get(CODE_COLUMN)
            try:
                record = resolve_code(cache, raw)
            except LookupFailure as e:
                logger.error(f"Row {row.get('InputRow', summary.total + 1)}: {e}")
                record = CodeRecord(normalize_code(raw), None, None, Status.VALID)
                summary.failed += 1

            summary.records.append(record)
            summary.total += 1
            if record.is_valid:
                summary.valid += 1

            if summary.total % progress_every == 0:
                bar += BAR_BLOCK
            if summary.total % progress_every == 0 or summary.total == len(rows):
                report(ProgressUpdate(summary.total, len(rows), bar))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Saving partial results...")
        sink.write_all(summary.records)
        raise

    logger.info("-" * 50)
    logger.info(f"Valid: {summary.valid}")
    logger.info(f"Invalid: {summary.invalid}")
    if summary.failed:
        logger.info(f"Lookup failures: {summary.failed}")
    logger.info("-" * 50)

    logger.info("Processing completed. Writing results to output file...")
    sink.write_all(summary.records)
    logger.info(f"File saved as {sink.path}")

    return summary
