from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import SQLModel, Field

from .common import utc_now


class IngestStatus(str, Enum):
    success = "success"
    partial = "partial"
    error = "error"


class IngestLog(SQLModel, table=True):
    """One row per ingest run. Rows are only ever inserted."""

    __tablename__ = "ingest_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    brand_id: int = Field(foreign_key="brands.id", index=True)
    status: IngestStatus = Field(index=True)
    changed_count: int = 0
    # JSON list with the first error messages of the run
    error: Optional[str] = None
    fetched_at: datetime = Field(default_factory=utc_now, index=True)
