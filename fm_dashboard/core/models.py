"""
Data models for FM Dashboard
Defines the work-order record consumed by the dashboard calculations.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from fm_dashboard.core.errors import InvalidDateInput


PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"
PRIORITY_CRITICAL = "Critical"

STATUS_OPEN = "Open"
STATUS_IN_PROGRESS = "In Progress"
STATUS_ON_HOLD = "On Hold"
STATUS_COMPLETED = "Completed"

CATEGORY_EMERGENCY = "Emergency"

UNKNOWN_PROPERTY = "Unknown Property"

# Raw payloads come from a JS-style API (camelCase); snake_case is accepted too.
_FIELD_ALIASES = {
    "due_date": ("dueDate", "due_date"),
    "created_date": ("createdDate", "created_date"),
    "completed_date": ("completedDate", "completed_date"),
}


@dataclass(frozen=True)
class TaskRecord:
    """Work order / task record as supplied by the data-access layer"""
    id: str
    title: str = ""
    property_name: str = UNKNOWN_PROPERTY
    due_date: Optional[datetime] = None
    created_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    priority: str = PRIORITY_MEDIUM
    status: str = STATUS_OPEN
    category: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        default_tz: tzinfo = timezone.utc
    ) -> 'TaskRecord':
        """
        Create TaskRecord from a raw row dictionary.

        Args:
            data: Raw record (camelCase or snake_case keys)
            default_tz: Timezone applied to naive timestamps

        Returns:
            Parsed TaskRecord

        Raises:
            InvalidDateInput: If a date is unparsable, or createdDate is missing
        """
        record_id = str(data.get('id', '')).strip() or None

        values = {}
        for name, aliases in _FIELD_ALIASES.items():
            raw = next((data[key] for key in aliases if data.get(key) not in (None, "")), None)
            values[name] = cls._parse_datetime(raw, record_id, aliases[0], default_tz)

        if values['created_date'] is None:
            raise InvalidDateInput(record_id, 'createdDate', None)

        return cls(
            id=record_id or "",
            title=str(data.get('title') or ''),
            property_name=str(data.get('property') or data.get('property_name') or UNKNOWN_PROPERTY),
            due_date=values['due_date'],
            created_date=values['created_date'],
            completed_date=values['completed_date'],
            priority=str(data.get('priority') or PRIORITY_MEDIUM),
            status=str(data.get('status') or STATUS_OPEN),
            category=str(data.get('category') or ''),
        )

    @staticmethod
    def _parse_datetime(
        value: Any,
        record_id: Optional[str],
        field: str,
        default_tz: tzinfo
    ) -> Optional[datetime]:
        """Parse a timestamp, attaching default_tz when it carries none"""
        if value is None:
            return None

        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        else:
            try:
                parsed = date_parser.parse(str(value))
            except (ValueError, OverflowError) as exc:
                raise InvalidDateInput(record_id, field, value) from exc

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=default_tz)
        return parsed
