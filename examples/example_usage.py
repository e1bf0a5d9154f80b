"""Example: run the analytics service without Flask.

Controllers are a thin layer; the aggregation lives in AnalyticsService.
"""

import importlib
import json

from config import get_settings_module

from src.attendance_analytics.attendance_analytics.attendance.model import AnalyticsFilters
from src.attendance_analytics.attendance_analytics.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    filters = AnalyticsFilters(time_range="custom", start_date="2025-01-15", end_date="2025-01-17")
    result = container.analytics_service.get_analytics(filters)
    print(json.dumps(result["data"]["summary"], indent=2))


if __name__ == "__main__":
    main()
