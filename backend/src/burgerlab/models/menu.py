from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship

from .brands import Brand
from .common import utc_now


class MenuItem(SQLModel, table=True):
    __tablename__ = "menu_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    brand_id: int = Field(foreign_key="brands.id", index=True)
    # (brand_id, name) is the natural key of the ingest; only the upsert enforces it
    name: str = Field(index=True)
    category: str = Field(default="burger", index=True)
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    brand: Optional[Brand] = Relationship(back_populates="menu_items")
    nutrition: Optional["Nutrition"] = Relationship(
        back_populates="menu_item",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )


class Nutrition(SQLModel, table=True):
    __tablename__ = "nutrition"

    id: Optional[int] = Field(default=None, primary_key=True)
    menu_item_id: int = Field(foreign_key="menu_items.id", unique=True, index=True)

    # every value is optional, partial tables are normal
    kcal: Optional[int] = None
    protein: Optional[float] = None
    saturated_fat: Optional[float] = None
    sodium: Optional[float] = None
    sugar: Optional[float] = None

    menu_item: Optional[MenuItem] = Relationship(back_populates="nutrition")
