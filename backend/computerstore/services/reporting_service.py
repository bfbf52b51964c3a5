# Overview: Read-only report queries; returns JSON-ready dicts.

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func

from computerstore.extensions import db
from computerstore.models import (
    PAYMENT_CASH,
    PAYMENT_CASHLESS,
    CashLimitViolation,
    CashRegister,
    CustomerOrder,
    Equipment,
    Sale,
    SaleItem,
    Seller,
    SellerWorkSchedule,
    StorePoint,
    Supplier,
    SupplierOrder,
)
from computerstore.money import ZERO, money_str
from computerstore.time_utils import current_week_start, month_bounds, to_utc_z, utcnow, week_bounds


class ReportError(Exception):
    """Raised when report parameters are invalid."""
    pass


def _dec(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _check_month(month: int, year: int) -> tuple[datetime, datetime]:
    if not 1 <= month <= 12:
        raise ReportError("month must be between 1 and 12")
    return month_bounds(year, month)


def store_point_equipment(store_point_id: int) -> list[dict]:
    """Unsold units on a store point floor."""
    rows = (
        db.session.query(Equipment, Supplier.name)
        .join(Supplier, Supplier.id == Equipment.supplier_id)
        .filter(Equipment.store_point_id == store_point_id, Equipment.is_sold.is_(False))
        .order_by(Equipment.id)
        .all()
    )
    return [
        {
            "equipment_id": e.id,
            "name": e.name,
            "purchase_price": money_str(e.purchase_price),
            "supplier_markup": str(e.supplier_markup),
            "receipt_date": to_utc_z(e.receipt_date),
            "invoice_number": e.invoice_number,
            "warranty_months": e.warranty_months,
            "supplier_name": supplier_name,
        }
        for e, supplier_name in rows
    ]


def central_warehouse_state(as_of: datetime) -> list[dict]:
    """Unsold central-warehouse units received on or before `as_of`."""
    rows = (
        db.session.query(Equipment, Supplier.name)
        .join(Supplier, Supplier.id == Equipment.supplier_id)
        .filter(
            Equipment.is_on_central_warehouse.is_(True),
            Equipment.is_sold.is_(False),
            Equipment.receipt_date <= as_of,
        )
        .order_by(Equipment.id)
        .all()
    )
    return [
        {
            "equipment_id": e.id,
            "name": e.name,
            "purchase_price": money_str(e.purchase_price),
            "receipt_date": to_utc_z(e.receipt_date),
            "supplier_name": supplier_name,
        }
        for e, supplier_name in rows
    ]


def total_warehouse() -> list[dict]:
    rows = (
        db.session.query(Equipment, Supplier.name)
        .join(Supplier, Supplier.id == Equipment.supplier_id)
        .filter(Equipment.is_sold.is_(False))
        .order_by(Equipment.id)
        .all()
    )
    return [
        {
            "equipment_id": e.id,
            "name": e.name,
            "location": e.location_label,
            "purchase_price": money_str(e.purchase_price),
            "supplier_name": supplier_name,
        }
        for e, supplier_name in rows
    ]


def seller_sales(seller_id: int) -> list[dict]:
    sales = (
        db.session.query(Sale)
        .filter(Sale.seller_id == seller_id)
        .order_by(Sale.sale_date, Sale.id)
        .all()
    )
    result = []
    for sale in sales:
        names = (
            db.session.query(Equipment.name)
            .join(SaleItem, SaleItem.equipment_id == Equipment.id)
            .filter(SaleItem.sale_id == sale.id)
            .order_by(SaleItem.id)
            .all()
        )
        result.append({
            "sale_id": sale.id,
            "sale_date": to_utc_z(sale.sale_date),
            "payment_type": sale.payment_type,
            "total_amount": money_str(sale.total_with_sales_tax),
            "store_point_name": sale.store_point.name,
            "items": [n for (n,) in names],
        })
    return result


def sellers_sales_report(start: datetime, end: datetime) -> list[dict]:
    """Per-seller totals over [start, end], biggest first."""
    rows = (
        db.session.query(
            Seller,
            func.coalesce(func.sum(Sale.total_with_sales_tax), 0).label("total"),
            func.count(Sale.id).label("sales_count"),
        )
        .join(Sale, Sale.seller_id == Seller.id)
        .filter(Sale.sale_date >= start, Sale.sale_date <= end)
        .group_by(Seller.id)
        .all()
    )
    report = [
        {
            "seller_id": seller.id,
            "seller_name": seller.full_name,
            "total_sales": _dec(total),
            "sales_count": sales_count,
        }
        for seller, total, sales_count in rows
    ]
    report.sort(key=lambda r: r["total_sales"], reverse=True)
    for row in report:
        row["total_sales"] = money_str(row["total_sales"])
    return report


def popular_products(start: datetime, end: datetime) -> list[dict]:
    sales_count = func.count(SaleItem.id).label("sales_count")
    rows = (
        db.session.query(Equipment.name, sales_count)
        .join(SaleItem, SaleItem.equipment_id == Equipment.id)
        .join(Sale, Sale.id == SaleItem.sale_id)
        .filter(Sale.sale_date >= start, Sale.sale_date <= end)
        .group_by(Equipment.name)
        .order_by(sales_count.desc(), Equipment.name)
        .all()
    )
    return [{"product_name": name, "sales_count": count} for name, count in rows]


def revenue_report(start: datetime, end: datetime) -> dict:
    """
    Company revenue over [start, end].

    Cash revenue counts totals with sales tax; cashless revenue counts totals
    with VAT. Profit is final price minus purchase price over all items.
    """
    sales = (
        db.session.query(Sale)
        .filter(Sale.sale_date >= start, Sale.sale_date <= end)
        .all()
    )
    cash = sum((_dec(s.total_with_sales_tax) for s in sales if s.payment_type == PAYMENT_CASH), ZERO)
    cashless = sum((_dec(s.total_with_vat) for s in sales if s.payment_type == PAYMENT_CASHLESS), ZERO)

    profit = (
        db.session.query(func.coalesce(func.sum(SaleItem.final_price - SaleItem.purchase_price), 0))
        .join(Sale, Sale.id == SaleItem.sale_id)
        .filter(Sale.sale_date >= start, Sale.sale_date <= end)
        .scalar()
    )
    return {
        "cash_revenue": money_str(cash),
        "cashless_revenue": money_str(cashless),
        "total_revenue": money_str(cash + cashless),
        "total_profit": money_str(_dec(profit)),
    }


def unsold_products(start: datetime, end: datetime, now: datetime | None = None) -> list[dict]:
    now = now or utcnow()
    units = (
        db.session.query(Equipment)
        .filter(
            Equipment.is_sold.is_(False),
            Equipment.receipt_date >= start,
            Equipment.receipt_date <= end,
        )
        .order_by(Equipment.receipt_date, Equipment.id)
        .all()
    )
    return [
        {
            "product_name": e.name,
            "location": e.location_label,
            "receipt_date": to_utc_z(e.receipt_date),
            "days_in_stock": (now - e.receipt_date).days,
        }
        for e in units
    ]


def seller_orders(seller_id: int, today: date | None = None) -> list[dict]:
    """A seller's customer orders for the current Monday-based week."""
    start, end = week_bounds(current_week_start(today))
    orders = (
        db.session.query(CustomerOrder)
        .filter(
            CustomerOrder.seller_id == seller_id,
            CustomerOrder.order_date >= start,
            CustomerOrder.order_date < end,
        )
        .order_by(CustomerOrder.order_date, CustomerOrder.id)
        .all()
    )
    return [o.to_dict() for o in orders]


def weekly_supplier_orders(week_start: datetime) -> list[dict]:
    start, end = week_bounds(week_start)
    rows = (
        db.session.query(SupplierOrder, Supplier.name)
        .join(Supplier, Supplier.id == SupplierOrder.supplier_id)
        .filter(SupplierOrder.week_start_date >= start, SupplierOrder.week_end_date <= end)
        .order_by(SupplierOrder.id)
        .all()
    )
    return [
        {
            "supplier_name": supplier_name,
            "week_start": to_utc_z(order.week_start_date),
            "week_end": to_utc_z(order.week_end_date),
            "ordered_items": [order.order_details],
        }
        for order, supplier_name in rows
    ]


def seller_schedule(seller_id: int, month: int, year: int) -> list[dict]:
    start, end = _check_month(month, year)
    shifts = (
        db.session.query(SellerWorkSchedule)
        .filter(
            SellerWorkSchedule.seller_id == seller_id,
            SellerWorkSchedule.work_date >= start.date(),
            SellerWorkSchedule.work_date < end.date(),
        )
        .order_by(SellerWorkSchedule.work_date, SellerWorkSchedule.start_time)
        .all()
    )
    return [
        {
            "date": s.work_date.isoformat(),
            "seller_name": s.seller.full_name,
            "store_point_name": s.store_point.name,
            "start_time": s.start_time.strftime("%H:%M"),
            "end_time": s.end_time.strftime("%H:%M"),
        }
        for s in shifts
    ]


def store_point_turnover(month: int, year: int) -> list[dict]:
    start, end = _check_month(month, year)
    rows = (
        db.session.query(
            StorePoint.name,
            func.coalesce(func.sum(Sale.total_with_sales_tax), 0),
            func.count(Sale.id),
        )
        .join(Sale, Sale.store_point_id == StorePoint.id)
        .filter(Sale.sale_date >= start, Sale.sale_date < end)
        .group_by(StorePoint.id, StorePoint.name)
        .all()
    )
    report = sorted(
        ((name, _dec(revenue), count) for name, revenue, count in rows),
        key=lambda r: r[1],
        reverse=True,
    )
    return [
        {"store_point_name": name, "monthly_revenue": money_str(revenue), "sales_count": count}
        for name, revenue, count in report
    ]


def cash_limit_violations() -> list[dict]:
    rows = (
        db.session.query(CashLimitViolation, CashRegister.registration_number, StorePoint.name)
        .join(CashRegister, CashRegister.id == CashLimitViolation.cash_register_id)
        .join(StorePoint, StorePoint.id == CashRegister.store_point_id)
        .order_by(CashLimitViolation.violation_date.desc(), CashLimitViolation.id.desc())
        .all()
    )
    return [
        {
            "store_point_name": store_point_name,
            "cash_register_number": registration_number,
            "violation_date": to_utc_z(v.violation_date),
            "limit_amount": money_str(v.limit_amount),
            "actual_amount": money_str(v.actual_amount),
            "excess_amount": money_str(v.excess_amount),
        }
        for v, registration_number, store_point_name in rows
    ]


def monthly_report(month: int, year: int) -> list[dict]:
    """Per store point: units shipped to the floor, units sold, revenue and profit."""
    start, end = _check_month(month, year)
    reports = []
    for store_point in db.session.query(StorePoint).order_by(StorePoint.id).all():
        shipped = (
            db.session.query(
                Equipment.name,
                func.count(Equipment.id),
                func.min(Equipment.receipt_date),
            )
            .filter(
                Equipment.store_point_id == store_point.id,
                Equipment.is_on_central_warehouse.is_(False),
                Equipment.receipt_date >= start,
                Equipment.receipt_date < end,
            )
            .group_by(Equipment.name)
            .order_by(Equipment.name)
            .all()
        )
        sold = (
            db.session.query(
                Equipment.name,
                func.count(SaleItem.id),
                func.coalesce(func.sum(SaleItem.final_price), 0),
                func.coalesce(func.sum(SaleItem.final_price - SaleItem.purchase_price), 0),
            )
            .join(SaleItem, SaleItem.equipment_id == Equipment.id)
            .join(Sale, Sale.id == SaleItem.sale_id)
            .filter(
                Sale.store_point_id == store_point.id,
                Sale.sale_date >= start,
                Sale.sale_date < end,
            )
            .group_by(Equipment.name)
            .order_by(Equipment.name)
            .all()
        )
        total_revenue = sum((_dec(r) for _, _, r, _ in sold), ZERO)
        total_profit = sum((_dec(p) for _, _, _, p in sold), ZERO)
        reports.append({
            "store_point_name": store_point.name,
            "shipped_products": [
                {"name": name, "quantity": qty, "shipment_date": to_utc_z(first)}
                for name, qty, first in shipped
            ],
            "sold_products": [
                {
                    "name": name,
                    "quantity": qty,
                    "revenue": money_str(_dec(revenue)),
                    "profit": money_str(_dec(profit)),
                }
                for name, qty, revenue, profit in sold
            ],
            "total_revenue": money_str(total_revenue),
            "total_profit": money_str(total_profit),
        })
    return reports
