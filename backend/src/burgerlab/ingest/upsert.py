"""Create-or-merge writes keyed by (brand_id, name).

This module is the only place that enforces the one-item-per-name rule; the
schema does not. Merges never clear a stored value: only fields that carry a
new value are written.
"""
from __future__ import annotations

from typing import Optional, Tuple

from sqlmodel import Session, select

from burgerlab.models.common import utc_now
from burgerlab.models.menu import MenuItem, Nutrition

from .records import CandidateRecord, NutritionFacts

DEFAULT_CATEGORY = "burger"


def find_menu_item(session: Session, brand_id: int, name: str) -> Optional[MenuItem]:
    stmt = select(MenuItem).where(MenuItem.brand_id == brand_id, MenuItem.name == name)
    return session.exec(stmt).first()


def upsert_menu_item(
    session: Session,
    brand_id: int,
    name: str,
    record: CandidateRecord,
    category: str = DEFAULT_CATEGORY,
) -> Tuple[MenuItem, bool]:
    """Returns ``(item, created)``. The item is flushed, not committed."""
    item = find_menu_item(session, brand_id, name)
    created = item is None
    if created:
        item = MenuItem(
            brand_id=brand_id,
            name=name,
            category=category,
            image_url=record.image_url,
            detail_url=record.detail_url,
            description=record.description,
            is_active=True,
        )
    else:
        if record.image_url:
            item.image_url = record.image_url
        if record.detail_url:
            item.detail_url = record.detail_url
        if record.description is not None:
            item.description = record.description
        item.updated_at = utc_now()
    session.add(item)
    session.flush()
    return item, created


def upsert_nutrition(session: Session, menu_item_id: int, facts: Optional[NutritionFacts]) -> Optional[Nutrition]:
    if facts is None or facts.is_empty():
        return None
    nutrition = session.exec(select(Nutrition).where(Nutrition.menu_item_id == menu_item_id)).first()
    if nutrition is None:
        nutrition = Nutrition(menu_item_id=menu_item_id)
    for key, value in facts.present().items():
        setattr(nutrition, key, value)
    session.add(nutrition)
    session.flush()
    return nutrition
