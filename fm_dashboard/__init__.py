"""
FM Dashboard: priority inbox and KPI snapshot for facility work orders.
"""

__version__ = "0.1.0"
