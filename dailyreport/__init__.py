"""dailyreport: daily report lifecycle service."""
