"""
Core module for FM Dashboard
Contains configuration, clock, loader, and model definitions
"""

from .clock import ClockSource, FixedClock, SystemClock
from .config import Config, UrgencyWeights
from .errors import FMDashboardError, InvalidDateInput, RecordFormatError
from .loader import LoadResult, load_records, load_records_file
from .models import TaskRecord

__all__ = [
    'ClockSource', 'FixedClock', 'SystemClock',
    'Config', 'UrgencyWeights',
    'FMDashboardError', 'InvalidDateInput', 'RecordFormatError',
    'LoadResult', 'load_records', 'load_records_file',
    'TaskRecord',
]
