"""
Dashboard-wide statistics
"""
from .service import DashboardStatsService

__all__ = ['DashboardStatsService']
