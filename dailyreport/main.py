"""dailyreport: FastAPI application entry point."""

import logging
import logging.config
from contextlib import asynccontextmanager
from pathlib import Path

import yaml
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from dailyreport.api import health, reports, settings as settings_api, status
from dailyreport.config import get_settings, load_window_config
from dailyreport.core.clock import SystemClock, resolve_timezone
from dailyreport.core.window import WindowSettings
from dailyreport.delivery.pipeline import LocalFileExistenceChecker
from dailyreport.delivery.telegram import TelegramClient
from dailyreport.lifecycle import build_lifecycle
from dailyreport.logging_setup import configure_structured_logging
from dailyreport.repositories.mongo import (
    MongoReportRepository,
    MongoStatusStateRepository,
    create_mongo_client,
    ensure_indexes,
    get_database,
)

logger = logging.getLogger(__name__)


class _NoopSender:
    """Send capability used when delivery is disabled; every send fails."""

    async def send_text(self, body: str) -> bool:
        del body
        logger.warning("Delivery disabled; text message not sent.")
        return False

    async def send_attachment(self, path: str) -> bool:
        logger.warning("Delivery disabled; attachment not sent: path=%s", path)
        return False


def setup_logging(config_path: Path = Path("config/logging.yaml")) -> None:
    """Load logging configuration from YAML."""
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f)
        Path("data").mkdir(exist_ok=True)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    configure_structured_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.logging_config_path)
    logger.info("dailyreport starting up...")
    mongo_client = None
    scheduler: AsyncIOScheduler | None = None
    telegram_client: TelegramClient | None = None
    lifecycle = None

    try:
        window = settings.window
        if settings.window_config_path is not None:
            window = load_window_config(settings.window_config_path)
        logger.info(
            "Configuration loaded successfully (window=%s-%s, delivery=%s).",
            window.start_hour,
            window.end_hour,
            settings.delivery_method,
        )

        mongo_client = await create_mongo_client(settings.mongodb_uri)
        mongo_db = get_database(mongo_client, settings.mongodb_database)
        await ensure_indexes(mongo_db)
        app.state.mongo_client = mongo_client
        app.state.mongo_db = mongo_db
        app.state.settings = settings

        report_repo = MongoReportRepository(mongo_db)
        state_repo = MongoStatusStateRepository(mongo_db)

        if settings.delivery_method == "telegram":
            telegram_client = TelegramClient(
                token=settings.telegram_bot_token or "",
                chat_id=settings.telegram_chat_id,
                timeout_seconds=settings.telegram_timeout_seconds,
                send_attempts=settings.telegram_send_attempts,
                circuit_breaker_failure_threshold=settings.telegram_circuit_breaker_failure_threshold,
                circuit_breaker_recovery_seconds=settings.telegram_circuit_breaker_recovery_seconds,
            )
            sender = telegram_client
        else:
            sender = _NoopSender()
            logger.info("Delivery disabled by configuration.")

        lifecycle = build_lifecycle(
            report_repo=report_repo,
            state_repo=state_repo,
            text_sender=sender,
            attachment_sender=sender,
            clock=SystemClock(resolve_timezone(settings.timezone)),
            window_settings=WindowSettings(window),
            file_checker=LocalFileExistenceChecker(),
            device_name=settings.device_name,
        )
        await lifecycle.start()

        app.state.report_repo = report_repo
        app.state.state_repo = state_repo
        app.state.telegram_client = telegram_client
        app.state.lifecycle = lifecycle

        scheduler = AsyncIOScheduler()
        app.state.scheduler = scheduler
        if settings.timer_enabled:
            scheduler.add_job(
                lifecycle.timer.run_tick,
                trigger="interval",
                seconds=settings.tick_interval_seconds,
                id="timer_tick",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )
        if settings.auto_send_enabled:
            scheduler.add_job(
                lifecycle.auto_sender.run,
                trigger="cron",
                hour=settings.auto_send_hour,
                minute=settings.auto_send_minute,
                id="auto_send",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )
        if settings.timer_enabled or settings.auto_send_enabled:
            scheduler.start()
            logger.info(
                "Scheduler started (tick_interval=%ss auto_send=%s).",
                settings.tick_interval_seconds,
                f"{settings.auto_send_hour:02d}:{settings.auto_send_minute:02d}" if settings.auto_send_enabled else "off",
            )
        else:
            logger.info("Scheduler initialization skipped because timer and auto-send are disabled.")

        logger.info("dailyreport ready (status=%s).", lifecycle.status_manager.status.value)
        yield
    finally:
        logger.info("dailyreport shutting down...")
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
        if lifecycle is not None:
            lifecycle.stop()
        if telegram_client is not None:
            await telegram_client.close()
        if mongo_client is not None:
            mongo_client.close()


app = FastAPI(
    title="dailyreport",
    description="Daily report lifecycle service with timed window and message delivery",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(health.router)
app.include_router(status.router)
app.include_router(settings_api.router)
app.include_router(reports.router)


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
