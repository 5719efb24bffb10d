"""
Record loading for FM Dashboard.

Turns raw rows (JSON objects) into TaskRecord values. Rows whose dates
cannot be parsed are left out and reported, not silently dropped.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from fm_dashboard.core.errors import InvalidDateInput, RecordFormatError
from fm_dashboard.core.models import TaskRecord

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading a batch of rows."""
    records: List[TaskRecord] = field(default_factory=list)
    errors: List[InvalidDateInput] = field(default_factory=list)

    @property
    def excluded(self) -> int:
        """Number of rows left out because of invalid dates."""
        return len(self.errors)


def load_records(
    rows: Iterable[Dict[str, Any]],
    default_tz: tzinfo = timezone.utc
) -> LoadResult:
    """
    Parse raw rows into records, collecting date errors.

    Args:
        rows: Raw record dictionaries
        default_tz: Timezone applied to naive timestamps

    Returns:
        LoadResult with parsed records (input order kept) and rejected rows

    Raises:
        RecordFormatError: If a row is not a dictionary
    """
    result = LoadResult()
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise RecordFormatError(f"Item {index}: expected an object, got {type(row).__name__}")
        try:
            result.records.append(TaskRecord.from_dict(row, default_tz))
        except InvalidDateInput as exc:
            logger.warning("Excluding record: %s", exc)
            result.errors.append(exc)

    if result.errors:
        logger.info(
            "Loaded %d records, excluded %d with invalid dates",
            len(result.records), result.excluded
        )
    return result


def load_records_file(
    file_path: Union[str, Path],
    default_tz: tzinfo = timezone.utc
) -> LoadResult:
    """Parse a JSON file holding an array of record objects."""
    path = Path(file_path)
    with open(path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise RecordFormatError(f"{path}: malformed JSON ({exc.msg})") from exc

    if not isinstance(payload, list):
        raise RecordFormatError("JSON payload must be a list of objects")

    logger.debug("Read %d rows from %s", len(payload), path)
    return load_records(payload, default_tz)
