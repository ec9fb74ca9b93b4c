from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import Field
from sqlmodel import Session, select

from ..core.config import get_settings
from ..core.database import get_session
from ..ingest.driver import MAX_LOGGED_ERRORS, ContextFactory, IngestError, run_ingest
from ..ingest.profiles import SourceProfile, default_profiles
from ..ingest.records import CandidateRecord, IngestSummary, NutritionFacts
from ..ingest.upsert import upsert_menu_item, upsert_nutrition
from ..models.brands import Brand
from ..models.ingest_logs import IngestLog
from .common import ApiModel, MenuItemOut, NutritionOut

logger = logging.getLogger(__name__)


def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    token = get_settings().admin_token
    if not token:
        return
    if authorization != f"Bearer {token}":
        raise HTTPException(401, "Admin token required")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# -------------------- Dependencies (overridden in tests) --------------------
def get_profiles() -> Dict[str, SourceProfile]:
    return default_profiles()


def get_context_factory() -> Optional[ContextFactory]:
    return None  # driver default: live HTTP session + lazy headless browser


# -------------------- Schemas --------------------
class ScrapeResponse(ApiModel):
    success: bool
    brand: str
    total: int
    created: int
    updated: int
    errors: int
    error_details: List[str] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: IngestSummary) -> "ScrapeResponse":
        return cls(
            success=summary.success,
            brand=summary.brand,
            total=summary.total,
            created=summary.created,
            updated=summary.updated,
            errors=summary.errors,
            error_details=summary.error_details[:MAX_LOGGED_ERRORS],
        )


class NutritionIn(NutritionOut):
    pass


class MenuItemIn(ApiModel):
    name: str = Field(min_length=1)
    category: str = "burger"
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    description: Optional[str] = None
    nutrition: Optional[NutritionIn] = None


class BulkMenuItemsIn(ApiModel):
    brand_slug: str
    items: List[MenuItemIn]


class ManualUpsertOut(ApiModel):
    created: bool
    item: MenuItemOut


class BulkUpsertOut(ApiModel):
    brand: str
    created: int
    updated: int
    items: List[MenuItemOut]


class IngestLogOut(ApiModel):
    id: int
    brand_id: int
    status: str
    changed_count: int
    errors: List[str] = Field(default_factory=list)
    fetched_at: datetime


# -------------------- Helpers --------------------
def _get_brand(session: Session, slug: str) -> Brand:
    brand = session.exec(select(Brand).where(Brand.slug == slug)).first()
    if not brand:
        raise HTTPException(404, f"Brand '{slug}' not found")
    return brand


def _save_manual(session: Session, brand: Brand, payload: MenuItemIn):
    name = payload.name.strip()
    record = CandidateRecord(
        name=name,
        image_url=payload.image_url,
        detail_url=payload.detail_url,
        description=payload.description,
    )
    item, created = upsert_menu_item(session, brand.id, name, record, category=payload.category)
    if payload.nutrition is not None:
        upsert_nutrition(session, item.id, NutritionFacts(**payload.nutrition.model_dump()))
    return item, created


# -------------------- Endpoints --------------------
@router.post("/menu-items/bulk", response_model=BulkUpsertOut, status_code=201)
def bulk_upsert_menu_items(payload: BulkMenuItemsIn, session: Session = Depends(get_session)):
    """Create or merge several menu items of one brand in a single transaction."""
    brand = _get_brand(session, payload.brand_slug)
    saved, created_count = [], 0
    try:
        for entry in payload.items:
            item, created = _save_manual(session, brand, entry)
            created_count += int(created)
            saved.append(item)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for item in saved:
        session.refresh(item)
    return BulkUpsertOut(
        brand=brand.slug,
        created=created_count,
        updated=len(saved) - created_count,
        items=[MenuItemOut.model_validate(item) for item in saved],
    )


@router.post("/menu-items/{brand_slug}/scrape", response_model=ScrapeResponse)
def scrape_brand_menu(
    brand_slug: str,
    session: Session = Depends(get_session),
    profiles: Dict[str, SourceProfile] = Depends(get_profiles),
    context_factory: Optional[ContextFactory] = Depends(get_context_factory),
):
    """Run the ingest for one brand and return its summary.

    Partial failures (unmatched targets, broken pages) are reported in the
    body with a 200; only an unknown brand or scraper is a 404.
    """
    try:
        summary = run_ingest(session, brand_slug, profiles=profiles, context_factory=context_factory)
    except IngestError as exc:
        raise HTTPException(404, str(exc))
    logger.info("Ingest %s: created=%d updated=%d errors=%d",
                brand_slug, summary.created, summary.updated, summary.errors)
    return ScrapeResponse.from_summary(summary)


@router.post("/menu-items/{brand_slug}", response_model=ManualUpsertOut, status_code=201)
def upsert_brand_menu_item(brand_slug: str, payload: MenuItemIn, session: Session = Depends(get_session)):
    brand = _get_brand(session, brand_slug)
    item, created = _save_manual(session, brand, payload)
    session.commit()
    session.refresh(item)
    return ManualUpsertOut(created=created, item=MenuItemOut.model_validate(item))


@router.get("/ingest-logs", response_model=List[IngestLogOut])
def list_ingest_logs(
    brand: Optional[str] = None,
    limit: int = Query(20, ge=1, le=200),
    session: Session = Depends(get_session),
):
    stmt = select(IngestLog)
    if brand:
        stmt = stmt.where(IngestLog.brand_id == _get_brand(session, brand).id)
    rows = session.exec(stmt.order_by(IngestLog.fetched_at.desc(), IngestLog.id.desc()).limit(limit)).all()
    return [
        IngestLogOut(
            id=row.id,
            brand_id=row.brand_id,
            status=row.status.value if hasattr(row.status, "value") else str(row.status),
            changed_count=row.changed_count,
            errors=json.loads(row.error) if row.error else [],
            fetched_at=row.fetched_at,
        )
        for row in rows
    ]
