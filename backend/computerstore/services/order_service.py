# Overview: Customer order intake and weekly aggregation into supplier orders.

"""
Order aggregation.

Sellers log customer requests for equipment that is not in stock. Once a week
the unprocessed requests are grouped by equipment name and turned into one
SupplierOrder per name.

SUPPLIER RESOLUTION (approximate by nature):
1. a supplier that once delivered equipment with exactly that name
2. otherwise the first supplier on file
3. otherwise no order for that name
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import CustomerOrder, Equipment, Seller, Supplier, SupplierOrder
from computerstore.time_utils import utcnow, week_bounds
from .concurrency import run_with_retry, transaction_scope


def create_customer_order(
    seller_id: int,
    equipment_name: str,
    quantity: int,
    notes: str = "",
) -> CustomerOrder:
    if not equipment_name or not equipment_name.strip():
        raise ValidationError("equipment_name is required")
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer", {"quantity": quantity})

    if not db.session.get(Seller, seller_id):
        raise NotFoundError("Seller", seller_id)

    order = CustomerOrder(
        seller_id=seller_id,
        order_date=utcnow(),
        equipment_name=equipment_name.strip(),
        quantity=quantity,
        notes=notes or "",
        is_processed=False,
    )
    db.session.add(order)
    db.session.commit()
    return order


def supplier_by_equipment_name(session, equipment_name: str) -> Optional[Supplier]:
    return (
        session.query(Supplier)
        .join(Equipment, Equipment.supplier_id == Supplier.id)
        .filter(Equipment.name == equipment_name)
        .order_by(Equipment.id)
        .first()
    )


def first_available_supplier(session, equipment_name: str) -> Optional[Supplier]:
    return session.query(Supplier).order_by(Supplier.id).first()


SUPPLIER_STRATEGIES: tuple[Callable, ...] = (
    supplier_by_equipment_name,
    first_available_supplier,
)


def resolve_supplier(session, equipment_name: str) -> Optional[Supplier]:
    for strategy in SUPPLIER_STRATEGIES:
        supplier = strategy(session, equipment_name)
        if supplier is not None:
            return supplier
    return None


def format_order_details(equipment_name: str, total_quantity: int, order_count: int) -> str:
    return f"{equipment_name} - {total_quantity} шт. (Заказов: {order_count})"


def _group_by_name(orders: list[CustomerOrder]) -> dict[str, list[CustomerOrder]]:
    groups: dict[str, list[CustomerOrder]] = {}
    for order in orders:
        groups.setdefault(order.equipment_name, []).append(order)
    return groups


def generate_weekly_supplier_orders(week_start: date | datetime) -> list[SupplierOrder]:
    """
    Fold the week's unprocessed customer orders into supplier orders.

    The week is [week_start, week_start + 7 days). Supplier orders and the
    processed flags of every consumed customer order commit together. Nothing
    is written when no supplier order results.
    """
    start, end = week_bounds(week_start)

    def _op() -> list[SupplierOrder]:
        with transaction_scope() as session:
            customer_orders = (
                session.query(CustomerOrder)
                .filter(
                    CustomerOrder.is_processed.is_(False),
                    CustomerOrder.order_date >= start,
                    CustomerOrder.order_date < end,
                )
                .order_by(CustomerOrder.order_date, CustomerOrder.id)
                .all()
            )
            if not customer_orders:
                return []

            now = utcnow()
            supplier_orders: list[SupplierOrder] = []
            for name, group in _group_by_name(customer_orders).items():
                supplier = resolve_supplier(session, name)
                if supplier is None:
                    continue
                supplier_orders.append(SupplierOrder(
                    supplier_id=supplier.id,
                    order_date=now,
                    week_start_date=start,
                    week_end_date=end,
                    order_details=format_order_details(
                        name, sum(o.quantity for o in group), len(group),
                    ),
                    is_completed=False,
                ))

            if not supplier_orders:
                return []

            session.add_all(supplier_orders)
            for order in customer_orders:
                order.is_processed = True
            session.flush()
            return supplier_orders

    return run_with_retry(_op)


def list_supplier_orders(week_start: date | datetime) -> list[SupplierOrder]:
    start, end = week_bounds(week_start)
    return (
        db.session.query(SupplierOrder)
        .filter(SupplierOrder.week_start_date >= start, SupplierOrder.week_end_date <= end)
        .order_by(SupplierOrder.id)
        .all()
    )
