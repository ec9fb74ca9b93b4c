"""Reference brand rows. Every ingest profile needs its brand to exist."""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlmodel import Session, select

from .ingest.profiles import PROFILE_CLASSES
from .models.brands import Brand

logger = logging.getLogger(__name__)

# (slug, display name) for every brand with a registered scraper
BRANDS: Tuple[Tuple[str, str], ...] = tuple((cls.slug, cls.brand_name) for cls in PROFILE_CLASSES)


def seed_brands(session: Session) -> List[Brand]:
    """Insert missing brands; existing rows keep their values. Returns new rows."""
    created = []
    for slug, name in BRANDS:
        if session.exec(select(Brand).where(Brand.slug == slug)).first():
            continue
        brand = Brand(slug=slug, name=name)
        session.add(brand)
        created.append(brand)
    session.commit()
    for brand in created:
        session.refresh(brand)
        logger.info("Seeded brand %s (%s)", brand.slug, brand.name)
    return created
