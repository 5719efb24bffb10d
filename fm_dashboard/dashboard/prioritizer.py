"""
Urgency scoring and priority inbox for FM Dashboard.

Scores open work orders on an integer 1-10 scale so the dashboard can
surface what needs attention first.

Score formula (each term from UrgencyWeights, then capped at the ceiling):
    score = min(priority + due_pressure + property_impact + on_hold, ceiling)

With the default weights the lowest possible score is 1 (Low priority, far
due date) and the highest is 10.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from fm_dashboard.core.config import Config, UrgencyWeights
from fm_dashboard.core.models import (
    CATEGORY_EMERGENCY,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    STATUS_COMPLETED,
    STATUS_ON_HOLD,
    TaskRecord,
)
from fm_dashboard.dashboard.dates import day_difference, format_relative

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = UrgencyWeights()

# Display thresholds for urgency badges
CRITICAL_THRESHOLD = 9
HIGH_THRESHOLD = 7


@dataclass(frozen=True)
class PriorityItem:
    """Open work order with its urgency score and display label."""
    id: str
    title: str
    property_name: str
    due_label: str
    priority: str
    status: str
    urgency_score: int
    is_property_impacting: bool
    breakdown: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def urgency_level(self) -> str:
        return urgency_level(self.urgency_score)

    def to_dict(self) -> Dict[str, Any]:
        """Convert item to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "property": self.property_name,
            "due_label": self.due_label,
            "priority": self.priority,
            "status": self.status,
            "urgency_score": self.urgency_score,
            "urgency_level": self.urgency_level,
            "is_property_impacting": self.is_property_impacting,
        }


def is_property_impacting(record: TaskRecord) -> bool:
    """Emergencies and critical-priority work affect the property as a whole."""
    return record.category == CATEGORY_EMERGENCY or record.priority == PRIORITY_CRITICAL


def priority_weight(record: TaskRecord, weights: UrgencyWeights = DEFAULT_WEIGHTS) -> int:
    """Base points for the record's priority (unrecognized counts as Low)."""
    return weights.priority.get(record.priority, weights.default_priority)


def due_date_pressure(
    record: TaskRecord,
    now: datetime,
    weights: UrgencyWeights = DEFAULT_WEIGHTS
) -> int:
    """
    Bonus points for due-date proximity.

    Scoring (ceil day difference between due date and now):
        - Overdue (< 0): overdue bonus
        - Due today (0): due_today bonus
        - Due tomorrow (1): due_tomorrow bonus
        - Due in 2..due_soon_days: due_soon bonus
        - Later, or no due date: 0
    """
    if record.due_date is None:
        return 0

    days = day_difference(record.due_date, now)
    if days < 0:
        return weights.overdue
    elif days == 0:
        return weights.due_today
    elif days == 1:
        return weights.due_tomorrow
    elif days <= weights.due_soon_days:
        return weights.due_soon
    return 0


def calculate_urgency_score(
    record: TaskRecord,
    now: datetime,
    property_impacting: Optional[bool] = None,
    weights: UrgencyWeights = DEFAULT_WEIGHTS
) -> int:
    """
    Calculate the urgency score for one record.

    Args:
        record: Record to score
        now: Reference instant
        property_impacting: Impact flag decided by the caller; computed with
            is_property_impacting() when omitted
        weights: Policy table

    Returns:
        Integer score, at most weights.ceiling
    """
    if property_impacting is None:
        property_impacting = is_property_impacting(record)

    score = priority_weight(record, weights) + due_date_pressure(record, now, weights)
    if property_impacting:
        score += weights.property_impact
    if record.status == STATUS_ON_HOLD:
        score += weights.on_hold

    return min(score, weights.ceiling)


def urgency_level(score: int) -> str:
    """Badge label for a score: CRITICAL (>=9), HIGH (>=7), else MEDIUM."""
    if score >= CRITICAL_THRESHOLD:
        return "CRITICAL"
    if score >= HIGH_THRESHOLD:
        return "HIGH"
    return "MEDIUM"


def categorize_priority_item(record: TaskRecord, now: datetime) -> str:
    """
    Coarse triage bucket for a record.

    CRITICAL: critical priority, overdue, or a property-impacting emergency.
    URGENT: high priority, due within a day, or on hold.
    DUE_SOON: everything else.
    """
    days = day_difference(record.due_date, now) if record.due_date is not None else None

    if (record.priority == PRIORITY_CRITICAL
            or (days is not None and days < 0)
            or (record.category == CATEGORY_EMERGENCY and is_property_impacting(record))):
        return "CRITICAL"

    if (record.priority == PRIORITY_HIGH
            or (days is not None and days <= 1)
            or record.status == STATUS_ON_HOLD):
        return "URGENT"

    return "DUE_SOON"


class Prioritizer:
    """
    Priority inbox builder.

    Drops completed work, scores the rest and orders it by urgency.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        weights: Optional[UrgencyWeights] = None
    ):
        """
        Initialize prioritizer.

        Args:
            config: Configuration supplying weights and date format
            weights: Explicit weight table (overrides config)
        """
        self.config = config
        self.date_format = config.get("date_format") if config is not None else None
        if weights is not None:
            self.weights = weights
        elif config is not None:
            self.weights = config.get_urgency_weights()
        else:
            self.weights = DEFAULT_WEIGHTS

    def score_record(self, record: TaskRecord, now: datetime) -> PriorityItem:
        """
        Score a single record.

        Args:
            record: Record to score
            now: Reference instant

        Returns:
            PriorityItem with score and per-factor breakdown
        """
        impacting = is_property_impacting(record)
        score = calculate_urgency_score(record, now, impacting, self.weights)

        breakdown = {
            "priority": priority_weight(record, self.weights),
            "due_date": due_date_pressure(record, now, self.weights),
            "property_impact": self.weights.property_impact if impacting else 0,
            "on_hold": self.weights.on_hold if record.status == STATUS_ON_HOLD else 0,
            "ceiling": self.weights.ceiling,
        }

        return PriorityItem(
            id=record.id,
            title=record.title,
            property_name=record.property_name,
            due_label=format_relative(record.due_date, now, self.date_format),
            priority=record.priority,
            status=record.status,
            urgency_score=score,
            is_property_impacting=impacting,
            breakdown=breakdown,
        )

    def build_inbox(self, records: Iterable[TaskRecord], now: datetime) -> List[PriorityItem]:
        """
        Build the priority inbox.

        Args:
            records: All records (completed ones are skipped)
            now: Reference instant

        Returns:
            Items sorted by urgency score, highest first. Equal scores keep
            their input order.
        """
        items = [
            self.score_record(record, now)
            for record in records
            if record.status != STATUS_COMPLETED
        ]

        # sorted() is stable; the index makes the tie-break explicit
        ranked = sorted(enumerate(items), key=lambda pair: (-pair[1].urgency_score, pair[0]))
        logger.debug("Built inbox with %d open items", len(ranked))
        return [item for _, item in ranked]

    def get_top_priorities(
        self,
        records: Iterable[TaskRecord],
        now: datetime,
        n: int = 5
    ) -> List[PriorityItem]:
        """
        Get the top N inbox items.

        Args:
            records: Records to prioritize
            now: Reference instant
            n: Number of items to return (default 5)

        Returns:
            First N items of build_inbox()
        """
        return self.build_inbox(records, now)[:n]


def build_inbox(
    records: Iterable[TaskRecord],
    now: datetime,
    weights: UrgencyWeights = DEFAULT_WEIGHTS
) -> List[PriorityItem]:
    """Build the priority inbox with the given weights (see Prioritizer.build_inbox)."""
    return Prioritizer(weights=weights).build_inbox(records, now)


def summarize_inbox(items: List[PriorityItem], top_n: int = 5) -> Dict[str, int]:
    """
    Morning-briefing counts over the top of the inbox.

    Returns:
        Dict with total items, critical items (score >= 9) and
        property-impacting items among the first ``top_n``
    """
    top = items[:top_n]
    return {
        "total": len(items),
        "critical": sum(1 for item in top if item.urgency_score >= CRITICAL_THRESHOLD),
        "property_impacting": sum(1 for item in top if item.is_property_impacting),
    }
