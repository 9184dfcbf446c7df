import logging
from datetime import date

from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.cafeteria import CafeteriaMenuItem, CafeteriaSnack
from kampus.schemas.cafeteria import (
    MenuItemCreate,
    MenuItemOut,
    MenuItemUpdate,
    SnackCreate,
    SnackOut,
    SnackUpdate,
)

logger = logging.getLogger("kampus.cafeteria")

_CATEGORY_ORDER = {"main": 0, "side": 1, "dessert": 2, "drink": 3}


# ==================== daily menu ====================

def get_cafeteria_menu_by_date(db: Session, menu_date: date | str) -> list[MenuItemOut]:
    """Available items of one day, main dishes first."""
    if isinstance(menu_date, date):
        menu_date = menu_date.isoformat()
    rows = (
        db.query(CafeteriaMenuItem)
        .filter(CafeteriaMenuItem.menu_date == menu_date, CafeteriaMenuItem.available.is_(True))
        .order_by(CafeteriaMenuItem.name.asc())
        .all()
    )
    rows.sort(key=lambda r: _CATEGORY_ORDER.get(r.category, len(_CATEGORY_ORDER)))
    return [MenuItemOut.model_validate(r) for r in rows]


def create_menu_item(db: Session, body: MenuItemCreate) -> MenuItemOut:
    data = body.model_dump()
    data["menu_date"] = body.menu_date.isoformat()
    item = CafeteriaMenuItem(**data)
    db.add(item)
    commit_or_raise(db)
    logger.info("Menu item added for %s: %s", item.menu_date, item.name)
    return MenuItemOut.model_validate(item)


def update_menu_item(db: Session, item_id: int, body: MenuItemUpdate) -> MenuItemOut:
    item = db.query(CafeteriaMenuItem).filter(CafeteriaMenuItem.id == item_id).first()
    if not item:
        raise NotFoundError(f"Menu item {item_id} not found")

    data = body.model_dump(exclude_unset=True)
    if data.get("menu_date") is not None:
        data["menu_date"] = data["menu_date"].isoformat()
    for k, v in data.items():
        setattr(item, k, v)

    commit_or_raise(db)
    return MenuItemOut.model_validate(item)


def delete_menu_item(db: Session, item_id: int):
    item = db.query(CafeteriaMenuItem).filter(CafeteriaMenuItem.id == item_id).first()
    if not item:
        raise NotFoundError(f"Menu item {item_id} not found")
    db.delete(item)
    commit_or_raise(db)


# ==================== snacks ====================

def get_cafeteria_snacks(db: Session) -> list[SnackOut]:
    rows = (
        db.query(CafeteriaSnack)
        .filter(CafeteriaSnack.available.is_(True))
        .order_by(CafeteriaSnack.name.asc())
        .all()
    )
    return [SnackOut.model_validate(r) for r in rows]


def create_snack(db: Session, body: SnackCreate) -> SnackOut:
    snack = CafeteriaSnack(**body.model_dump())
    db.add(snack)
    commit_or_raise(db)
    return SnackOut.model_validate(snack)


def update_snack(db: Session, snack_id: int, body: SnackUpdate) -> SnackOut:
    snack = db.query(CafeteriaSnack).filter(CafeteriaSnack.id == snack_id).first()
    if not snack:
        raise NotFoundError(f"Snack {snack_id} not found")
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(snack, k, v)
    commit_or_raise(db)
    return SnackOut.model_validate(snack)


def delete_snack(db: Session, snack_id: int):
    snack = db.query(CafeteriaSnack).filter(CafeteriaSnack.id == snack_id).first()
    if not snack:
        raise NotFoundError(f"Snack {snack_id} not found")
    db.delete(snack)
    commit_or_raise(db)
