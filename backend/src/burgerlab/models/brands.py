from typing import List, Optional
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship

from .common import utc_now


class Brand(SQLModel, table=True):
    __tablename__ = "brands"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(index=True, unique=True)
    name: str
    logo_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    menu_items: List["MenuItem"] = Relationship(back_populates="brand")
