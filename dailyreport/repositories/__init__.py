"""Repository interfaces and concrete data access helpers."""

from dailyreport.repositories.base import ReportRepository, StatusStateRepository
from dailyreport.repositories.mongo import (
    MongoReportRepository,
    MongoStatusStateRepository,
    create_mongo_client,
    ensure_indexes,
    get_database,
)

__all__ = [
    "MongoReportRepository",
    "MongoStatusStateRepository",
    "ReportRepository",
    "StatusStateRepository",
    "create_mongo_client",
    "ensure_indexes",
    "get_database",
]
