# Overview: Equipment intake from suppliers and moves from the central warehouse to store points.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Equipment, StorePoint, Supplier
from ..money import quantize_markup, quantize_money, to_decimal
from computerstore.time_utils import utcnow
from .concurrency import lock_for_update, run_with_retry


MAX_PURCHASE_PRICE = Decimal("1e16")


def receive_equipment(
    supplier_id: int,
    name: str,
    purchase_price,
    supplier_markup,
    invoice_number: str = "",
    warranty_months: int = 0,
    store_point_id: int | None = None,
    receipt_date: datetime | None = None,
) -> Equipment:
    """
    Record one unit delivered by a supplier.

    Units land on the central warehouse unless delivered straight to a
    store point.
    """
    if not name or not name.strip():
        raise ValidationError("name is required")

    try:
        price = to_decimal(purchase_price)
        markup = to_decimal(supplier_markup)
    except ValueError as exc:
        raise ValidationError(str(exc))
    if price < 0 or price >= MAX_PURCHASE_PRICE:
        raise ValidationError("purchase_price must be >= 0 and fit Numeric(18, 2)", {"purchase_price": str(price)})
    if markup < 0 or markup > 1:
        raise ValidationError("supplier_markup must be between 0 and 1", {"supplier_markup": str(markup)})
    if warranty_months is None or warranty_months < 0:
        raise ValidationError("warranty_months must be >= 0")
    price = quantize_money(price)
    markup = quantize_markup(markup)

    if not db.session.get(Supplier, supplier_id):
        raise NotFoundError("Supplier", supplier_id)
    if store_point_id is not None and not db.session.get(StorePoint, store_point_id):
        raise NotFoundError("StorePoint", store_point_id)

    equipment = Equipment(
        supplier_id=supplier_id,
        name=name.strip(),
        purchase_price=price,
        supplier_markup=markup,
        invoice_number=invoice_number or "",
        warranty_months=warranty_months,
        receipt_date=receipt_date or utcnow(),
        store_point_id=store_point_id,
        is_on_central_warehouse=store_point_id is None,
        is_sold=False,
    )
    db.session.add(equipment)
    db.session.commit()
    return equipment


def transfer_equipment_to_store_point(equipment_id: int, store_point_id: int) -> bool:
    """
    Move an unsold unit onto a store point floor.

    Soft-fails: returns False (and writes nothing) when the unit is missing
    or sold, or the store point does not exist.
    """
    def _op() -> bool:
        equipment = lock_for_update(
            db.session.query(Equipment).filter_by(id=equipment_id)
        ).first()
        if equipment is None or equipment.is_sold:
            db.session.rollback()
            return False

        if db.session.get(StorePoint, store_point_id) is None:
            db.session.rollback()
            return False

        equipment.is_on_central_warehouse = False
        equipment.store_point_id = store_point_id
        db.session.commit()
        return True

    return run_with_retry(_op)


def get_equipment(equipment_id: int) -> Equipment:
    equipment = db.session.get(Equipment, equipment_id)
    if not equipment:
        raise NotFoundError("Equipment", equipment_id)
    return equipment
