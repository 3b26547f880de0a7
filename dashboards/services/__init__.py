"""
Dashboard services module
"""

from .farm import FarmDashboardService

__all__ = [
    'FarmDashboardService',
]
