"""
KPI aggregation module for FM Dashboard.

Reduces the full work-order set into one KPIMetrics snapshot: what is due
or overdue now, how quickly and how punctually work gets closed, and how
this week's completions compare with last week's.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from fm_dashboard.core.models import PRIORITY_CRITICAL, TaskRecord
from fm_dashboard.dashboard.dates import day_difference, is_same_day, round_half_up, to_utc

logger = logging.getLogger(__name__)

TREND_WINDOW = timedelta(days=7)

# Health labels for dashboard cards
SUCCESS = "success"
WARNING = "warning"
CRITICAL = "critical"
DEFAULT = "default"


@dataclass(frozen=True)
class KPIMetrics:
    """Aggregate performance snapshot."""
    due_today: int = 0
    overdue: int = 0
    critical: int = 0
    avg_completion_time: float = 0.0
    on_time_rate: float = 0.0
    weekly_trend: float = 0.0
    closure_rate: float = 0.0
    excluded_records: int = 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _percent(part: int, whole: int) -> float:
    return (part / whole * 100) if whole > 0 else 0.0


class KPIAggregator:
    """
    Computes the KPI snapshot for the dashboard.

    Stateless; every call recomputes from the records it is given.
    """

    def count_open(self, records: List[TaskRecord], now: datetime) -> Dict[str, int]:
        """
        Count open work by urgency.

        Returns:
            Dict with due_today, overdue and critical counts over
            non-completed records
        """
        open_records = [r for r in records if not r.is_completed]

        due_today = sum(
            1 for r in open_records
            if r.due_date is not None and is_same_day(r.due_date, now)
        )
        overdue = sum(
            1 for r in open_records
            if r.due_date is not None and to_utc(r.due_date, now) < to_utc(now, now)
        )
        critical = sum(1 for r in open_records if r.priority == PRIORITY_CRITICAL)

        return {"due_today": due_today, "overdue": overdue, "critical": critical}

    def completion_stats(self, records: List[TaskRecord]) -> Dict[str, float]:
        """
        Completion speed and punctuality over completed records.

        Average completion time is in whole days (rounded up per record).
        Records without a due date count as on time.

        Returns:
            Dict with avg_completion_time and on_time_rate (unrounded)
        """
        completed = [r for r in records if r.is_completed and r.completed_date is not None]
        if not completed:
            return {"avg_completion_time": 0.0, "on_time_rate": 0.0}

        durations = [
            day_difference(r.completed_date, r.created_date)
            for r in completed
            if r.created_date is not None
        ]
        avg_days = sum(durations) / len(durations) if durations else 0.0

        on_time = sum(
            1 for r in completed
            if r.due_date is None or to_utc(r.completed_date, r.due_date) <= to_utc(r.due_date, r.due_date)
        )

        return {
            "avg_completion_time": avg_days,
            "on_time_rate": _percent(on_time, len(completed)),
        }

    def weekly_trend(self, records: List[TaskRecord], now: datetime) -> float:
        """
        Percent change in completions: last 7 days vs the 7 days before.

        Windows are half-open, [now-7d, now) and [now-14d, now-7d). Returns 0
        when the earlier window has no completions.
        """
        current = to_utc(now, now)
        week_start = current - TREND_WINDOW
        prior_start = week_start - TREND_WINDOW

        this_week = 0
        last_week = 0
        for record in records:
            if record.completed_date is None:
                continue
            completed = to_utc(record.completed_date, now)
            if week_start <= completed < current:
                this_week += 1
            elif prior_start <= completed < week_start:
                last_week += 1

        if last_week == 0:
            return 0.0
        return (this_week - last_week) / last_week * 100

    def aggregate(
        self,
        records: Iterable[TaskRecord],
        now: datetime,
        excluded: int = 0
    ) -> KPIMetrics:
        """
        Aggregate all KPIs.

        Args:
            records: Full record set (completed and open)
            now: Reference instant
            excluded: Rows rejected upstream for invalid dates

        Returns:
            KPIMetrics with rates rounded to one decimal
        """
        records = list(records)

        counts = self.count_open(records, now)
        stats = self.completion_stats(records)
        completed_count = sum(1 for r in records if r.is_completed)

        metrics = KPIMetrics(
            due_today=counts["due_today"],
            overdue=counts["overdue"],
            critical=counts["critical"],
            avg_completion_time=round_half_up(stats["avg_completion_time"]),
            on_time_rate=round_half_up(stats["on_time_rate"]),
            weekly_trend=round_half_up(self.weekly_trend(records, now)),
            closure_rate=round_half_up(_percent(completed_count, len(records))),
            excluded_records=excluded,
        )

        if excluded:
            logger.warning("KPIs computed without %d records with invalid dates", excluded)
        logger.debug("Aggregated %d records: %s", len(records), metrics)
        return metrics


def calculate_kpi_metrics(
    records: Iterable[TaskRecord],
    now: datetime,
    excluded: int = 0
) -> KPIMetrics:
    """Aggregate KPIs with a default KPIAggregator."""
    return KPIAggregator().aggregate(records, now, excluded)


def kpi_status(metrics: KPIMetrics) -> Dict[str, str]:
    """
    Health label per metric, as the dashboard cards colour them.

    Returns:
        Dict mapping metric name to success / warning / critical / default
    """
    if metrics.on_time_rate >= 80:
        on_time = SUCCESS
    elif metrics.on_time_rate >= 60:
        on_time = WARNING
    else:
        on_time = CRITICAL

    if metrics.avg_completion_time <= 3:
        completion = SUCCESS
    elif metrics.avg_completion_time <= 7:
        completion = WARNING
    else:
        completion = CRITICAL

    return {
        "due_today": WARNING if metrics.due_today > 5 else DEFAULT,
        "overdue": CRITICAL if metrics.overdue > 0 else SUCCESS,
        "critical": CRITICAL if metrics.critical > 0 else SUCCESS,
        "on_time_rate": on_time,
        "avg_completion_time": completion,
        "closure_rate": SUCCESS if metrics.closure_rate >= 80 else WARNING,
    }


def format_trend(value: float) -> str:
    """Signed percentage, e.g. +12.5%, -3.0%, 0.0%."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value}%"
