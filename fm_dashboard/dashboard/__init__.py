"""
Dashboard module for FM Dashboard.

Provides urgency scoring, the priority inbox, KPI aggregation, relative
due-date labels and Rich formatting.
"""

from .prioritizer import (
    Prioritizer,
    PriorityItem,
    build_inbox,
    calculate_urgency_score,
    categorize_priority_item,
    due_date_pressure,
    is_property_impacting,
    priority_weight,
    summarize_inbox,
    urgency_level,
)
from .aggregator import (
    KPIAggregator,
    KPIMetrics,
    calculate_kpi_metrics,
    format_trend,
    kpi_status,
)
from .dates import format_relative
from .formatter import DashboardFormatter

__all__ = [
    # Prioritizer
    'Prioritizer',
    'PriorityItem',
    'build_inbox',
    'calculate_urgency_score',
    'categorize_priority_item',
    'due_date_pressure',
    'is_property_impacting',
    'priority_weight',
    'summarize_inbox',
    'urgency_level',
    # Aggregator
    'KPIAggregator',
    'KPIMetrics',
    'calculate_kpi_metrics',
    'format_trend',
    'kpi_status',
    # Dates
    'format_relative',
    # Formatter
    'DashboardFormatter',
]
