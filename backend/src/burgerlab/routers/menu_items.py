from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..core.database import get_session
from ..models.menu import MenuItem
from .common import MenuItemDetail

router = APIRouter(prefix="/menu-items", tags=["menu-items"])


@router.get("/{item_id}", response_model=MenuItemDetail)
def get_menu_item(item_id: int, session: Session = Depends(get_session)):
    item = session.get(MenuItem, item_id)
    if not item:
        raise HTTPException(404, f"Menu item {item_id} not found")
    return MenuItemDetail.model_validate(item)
