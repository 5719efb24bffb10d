"""
Error types for FM Dashboard.
"""

from typing import Any, Optional


class FMDashboardError(Exception):
    """Base class for all errors raised by fm_dashboard."""


class InvalidDateInput(FMDashboardError, ValueError):
    """
    A record date field is missing where required, or cannot be parsed.

    Attributes:
        record_id: Identifier of the offending record (if known)
        field: Name of the date field (dueDate, createdDate, completedDate)
        value: Raw value that failed to parse
    """

    def __init__(self, record_id: Optional[str], field: str, value: Any):
        self.record_id = record_id
        self.field = field
        self.value = value
        super().__init__(
            f"Record {record_id or '<unknown>'}: invalid {field} {value!r}"
        )


class RecordFormatError(FMDashboardError, ValueError):
    """Payload is not a list of record objects."""
