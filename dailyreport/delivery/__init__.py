"""Report delivery: formatting, the send pipeline and the Telegram adapter."""

from dailyreport.delivery.pipeline import DeliveryPipeline, DeliveryResult, LocalFileExistenceChecker, PartOutcome
from dailyreport.delivery.telegram import TelegramClient, TelegramError
