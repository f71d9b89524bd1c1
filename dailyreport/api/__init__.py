"""FastAPI route modules."""

from dailyreport.api import health, reports, settings, status

__all__ = ["health", "reports", "settings", "status"]
