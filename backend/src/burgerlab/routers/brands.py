from __future__ import annotations

import math
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from ..core.database import get_session
from ..models.brands import Brand
from ..models.menu import MenuItem
from .common import ApiModel, BrandOut, MenuItemOut

router = APIRouter(prefix="/brands", tags=["brands"])


class MenuItemPage(ApiModel):
    items: List[MenuItemOut]
    total: int
    page: int
    limit: int
    total_pages: int


def _get_brand(session: Session, slug: str) -> Brand:
    brand = session.exec(select(Brand).where(Brand.slug == slug)).first()
    if not brand:
        raise HTTPException(404, f"Brand '{slug}' not found")
    return brand


def _kcal_key(item: MenuItem, descending: bool):
    kcal = item.nutrition.kcal if item.nutrition else None
    # items without kcal always go last, ties by name
    if kcal is None:
        return (1, 0, item.name)
    return (0, -kcal if descending else kcal, item.name)


@router.get("", response_model=List[BrandOut])
def list_brands(session: Session = Depends(get_session)):
    return session.exec(select(Brand).order_by(Brand.id)).all()


@router.get("/{slug}", response_model=BrandOut)
def get_brand(slug: str, session: Session = Depends(get_session)):
    return _get_brand(session, slug)


@router.get("/{slug}/menu-items", response_model=MenuItemPage)
def list_brand_menu_items(
    slug: str,
    category: Optional[str] = None,
    sort: Optional[Literal["kcal_asc", "kcal_desc"]] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """Active menu items of a brand with nutrition, paginated."""
    brand = _get_brand(session, slug)
    stmt = select(MenuItem).where(MenuItem.brand_id == brand.id, MenuItem.is_active == True)  # noqa: E712
    if category:
        stmt = stmt.where(MenuItem.category == category)
    items = list(session.exec(stmt.order_by(MenuItem.id)).all())

    if sort:
        items.sort(key=lambda item: _kcal_key(item, sort == "kcal_desc"))

    total = len(items)
    start = (page - 1) * limit
    return MenuItemPage(
        items=[MenuItemOut.model_validate(item) for item in items[start:start + limit]],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )
