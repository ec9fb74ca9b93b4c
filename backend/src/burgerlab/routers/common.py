from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    # camelCase on the wire, snake_case in Python; ORM rows validate directly
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class NutritionOut(ApiModel):
    kcal: Optional[int] = None
    protein: Optional[float] = None
    saturated_fat: Optional[float] = None
    sodium: Optional[float] = None
    sugar: Optional[float] = None


class BrandOut(ApiModel):
    id: int
    slug: str
    name: str
    logo_url: Optional[str] = None


class MenuItemOut(ApiModel):
    id: int
    brand_id: int
    name: str
    category: str
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    nutrition: Optional[NutritionOut] = None
    created_at: datetime
    updated_at: datetime


class MenuItemDetail(MenuItemOut):
    brand: Optional[BrandOut] = None
