"""User-facing report actions built on the lifecycle core."""

from dailyreport.services.auto_send import AutoSender
from dailyreport.services.drafts import ReportService
from dailyreport.services.publisher import ReportPublisher
