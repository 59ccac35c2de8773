from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column(nullable: bool = False) -> Column:
    # A fresh Column per field; SQLAlchemy columns cannot be shared between tables
    return Column(DateTime(timezone=True), nullable=nullable)
