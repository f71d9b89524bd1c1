"""MongoDB connection and initialization helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from dailyreport.errors import ReportStoreError
from dailyreport.models.report import Report, ReportType
from dailyreport.models.status import StatusState, migrate_status

REPORTS_COLLECTION = Report.collection_name
STATUS_STATE_COLLECTION = StatusState.collection_name
STATUS_STATE_KEY = "report_status"


async def create_mongo_client(mongodb_uri: str) -> AsyncIOMotorClient:
    """Create and validate an async MongoDB client connection."""
    try:
        client = AsyncIOMotorClient(mongodb_uri)
        await client.admin.command("ping")
        return client
    except PyMongoError as exc:
        raise RuntimeError(f"Failed to connect to MongoDB at {mongodb_uri}: {exc}") from exc


def get_database(client: AsyncIOMotorClient, database_name: str) -> AsyncIOMotorDatabase:
    """Return configured MongoDB database handle."""
    return client[database_name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create required MongoDB indexes for report and status collections."""
    try:
        await db[REPORTS_COLLECTION].create_index([("report_id", ASCENDING)], unique=True, name="uq_report_id")
        await db[REPORTS_COLLECTION].create_index(
            [("day", ASCENDING), ("report_type", ASCENDING)],
            name="idx_report_day_type",
        )
        await db[REPORTS_COLLECTION].create_index([("created_at", ASCENDING)], name="idx_report_created_at")
        await db[STATUS_STATE_COLLECTION].create_index([("key", ASCENDING)], unique=True, name="uq_status_key")
    except PyMongoError as exc:
        raise RuntimeError(f"Failed to ensure MongoDB indexes: {exc}") from exc


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _strip_mongo_id(document: dict[str, Any] | None) -> dict[str, Any] | None:
    if document is None:
        return None
    cleaned = dict(document)
    cleaned.pop("_id", None)
    return cleaned


def _type_value(report_type: ReportType | str) -> str:
    return report_type.value if isinstance(report_type, ReportType) else str(report_type)


class MongoReportRepository:
    """MongoDB-backed daily report repository.

    Driver errors surface as ``ReportStoreError`` so callers can treat the
    store as unavailable without knowing about pymongo.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[REPORTS_COLLECTION]

    async def save(self, report: Report) -> str:
        payload = report.model_dump()
        try:
            await self.collection.replace_one({"report_id": report.report_id}, payload, upsert=True)
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to save report '{report.report_id}': {exc}") from exc
        return report.report_id

    async def get(self, report_id: str) -> Report | None:
        try:
            document = await self.collection.find_one({"report_id": report_id})
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to load report '{report_id}': {exc}") from exc
        cleaned = _strip_mongo_id(document)
        return Report.model_validate(cleaned) if cleaned else None

    async def fetch_today(self, today: date, report_type: ReportType = ReportType.REGULAR) -> Report | None:
        query = {"day": today.isoformat(), "report_type": _type_value(report_type)}
        try:
            document = await self.collection.find_one(query, sort=[("updated_at", DESCENDING)])
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to load report for {today}: {exc}") from exc
        cleaned = _strip_mongo_id(document)
        return Report.model_validate(cleaned) if cleaned else None

    async def exists(self, day: date, report_type: ReportType = ReportType.REGULAR) -> bool:
        query = {"day": day.isoformat(), "report_type": _type_value(report_type)}
        try:
            document = await self.collection.find_one(query, {"_id": 1})
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to check report for {day}: {exc}") from exc
        return document is not None

    async def mark_published(self, report_id: str) -> None:
        now = _utc_now()
        try:
            result = await self.collection.update_one(
                {"report_id": report_id},
                {"$set": {"published": True, "published_at": now, "updated_at": now}},
            )
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to mark report '{report_id}' published: {exc}") from exc
        if result.matched_count == 0:
            raise ReportStoreError(f"Report '{report_id}' no longer exists")

    async def delete(self, report_id: str) -> bool:
        try:
            result = await self.collection.delete_one({"report_id": report_id})
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to delete report '{report_id}': {exc}") from exc
        return result.deleted_count > 0

    async def list_recent(self, limit: int = 20, report_type: ReportType | None = None) -> list[Report]:
        query: dict[str, Any] = {}
        if report_type is not None:
            query["report_type"] = _type_value(report_type)
        items: list[Report] = []
        try:
            cursor = self.collection.find(query).sort("day", DESCENDING).limit(limit)
            async for document in cursor:
                cleaned = _strip_mongo_id(document)
                if cleaned:
                    items.append(Report.model_validate(cleaned))
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to list reports: {exc}") from exc
        return items


class MongoStatusStateRepository:
    """Single-document store for the status manager's persisted state."""

    def __init__(self, db: AsyncIOMotorDatabase, key: str = STATUS_STATE_KEY):
        self.collection = db[STATUS_STATE_COLLECTION]
        self.key = key

    async def load(self) -> StatusState | None:
        try:
            document = await self.collection.find_one({"key": self.key})
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to load status state: {exc}") from exc
        cleaned = _strip_mongo_id(document)
        if not cleaned:
            return None
        cleaned.pop("key", None)
        cleaned["status"] = migrate_status(cleaned.get("status"))
        return StatusState.model_validate(cleaned)

    async def save(self, state: StatusState) -> None:
        payload = state.model_dump()
        payload["key"] = self.key
        try:
            await self.collection.replace_one({"key": self.key}, payload, upsert=True)
        except PyMongoError as exc:
            raise ReportStoreError(f"Failed to save status state: {exc}") from exc
