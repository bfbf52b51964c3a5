"""
Sale transaction engine.

WHY: A sale is a single atomic unit: actors are validated, every cart item is
checked and priced, the register's daily cash limit is enforced, equipment is
marked sold and the Sale with its SaleItems is written, or nothing changes.

PIPELINE (fail-fast, each failure aborts with no partial effect):
1. Seller exists
2. Store point exists
3. Cashless only where the store point supports it
4. Cash requires a register belonging to the store point
5. Each unit exists, is unsold, is on a store floor, markup <= 30%
6. Price every unit and accumulate totals
7. Cash: same-day register total + this sale must stay within the limit
8. Mark units sold, number the sale, persist

The only write that survives a failed sale is the CashLimitViolation audit
record from step 7, committed separately after the sale rolls back.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from ..errors import (
    ALREADY_SOLD,
    CASH_LIMIT_EXCEEDED,
    CASHLESS_NOT_SUPPORTED,
    EQUIPMENT_NOT_SELLABLE,
    MARKUP_EXCEEDED,
    REGISTER_REQUIRED,
    ConflictError,
    NotFoundError,
    PolicyViolationError,
    ValidationError,
)
from ..extensions import db
from ..models import (
    PAYMENT_CASH,
    PAYMENT_CASHLESS,
    PAYMENT_TYPES,
    CashRegister,
    Equipment,
    Sale,
    SaleItem,
    Seller,
    StorePoint,
)
from ..money import money_str, quantize_markup, to_decimal
from computerstore.time_utils import utcnow
from . import cash_limit_service, pricing_service
from .concurrency import lock_for_update, run_with_retry, transaction_scope


CHECK_PREFIX = "CHK"
PAYMENT_ORDER_PREFIX = "PP"


@dataclass(frozen=True)
class SaleItemRequest:
    equipment_id: int
    seller_markup: Decimal


class _CashLimitBreach(Exception):
    """Internal signal: unwind the sale transaction, then audit the breach."""

    def __init__(self, check: cash_limit_service.CashLimitCheck):
        super().__init__("cash limit exceeded")
        self.check = check


def generate_document_number(payment_type: str, when=None) -> str:
    """CHK-<yyyymmdd>-<8 hex> for cash, PP-<yyyymmdd>-<8 hex> for cashless."""
    when = when or utcnow()
    prefix = CHECK_PREFIX if payment_type == PAYMENT_CASH else PAYMENT_ORDER_PREFIX
    return f"{prefix}-{when:%Y%m%d}-{uuid.uuid4().hex[:8]}"


def _normalize_items(items: Iterable[SaleItemRequest | Mapping]) -> list[SaleItemRequest]:
    normalized: list[SaleItemRequest] = []
    for raw in items or []:
        if isinstance(raw, SaleItemRequest):
            equipment_id, seller_markup = raw.equipment_id, raw.seller_markup
        else:
            try:
                equipment_id = raw["equipment_id"]
                seller_markup = raw.get("seller_markup", 0)
            except (KeyError, TypeError, AttributeError):
                raise ValidationError("Each item requires equipment_id and seller_markup")

        if not isinstance(equipment_id, int) or isinstance(equipment_id, bool):
            raise ValidationError("equipment_id must be an integer", {"equipment_id": equipment_id})
        try:
            markup = to_decimal(seller_markup)
        except ValueError:
            raise ValidationError("seller_markup must be a number", {"equipment_id": equipment_id})
        if markup < 0 or markup > 1:
            raise ValidationError(
                "seller_markup must be between 0 and 1",
                {"equipment_id": equipment_id, "seller_markup": str(markup)},
            )
        # Priced at the precision SaleItem.seller_markup stores
        normalized.append(SaleItemRequest(equipment_id=equipment_id, seller_markup=quantize_markup(markup)))

    if not normalized:
        raise ValidationError("Cannot create a sale with no items")
    return normalized


def _require_register(session, store_point_id: int, cash_register_id: int | None) -> CashRegister:
    if cash_register_id is None:
        raise PolicyViolationError(
            REGISTER_REQUIRED,
            "A cash register is required for cash payments",
        )
    register = lock_for_update(
        session.query(CashRegister).filter_by(id=cash_register_id, store_point_id=store_point_id)
    ).first()
    if not register:
        raise NotFoundError(
            "CashRegister",
            cash_register_id,
            message=f"Cash register {cash_register_id} not found at store point {store_point_id}",
        )
    return register


def _load_sellable_equipment(session, request: SaleItemRequest) -> Equipment:
    equipment = lock_for_update(
        session.query(Equipment).filter_by(id=request.equipment_id)
    ).first()
    if not equipment:
        raise NotFoundError("Equipment", request.equipment_id)

    if equipment.is_sold:
        raise ConflictError(
            ALREADY_SOLD,
            f"Equipment {equipment.id} is already sold",
            equipment_id=equipment.id,
        )

    if not equipment.is_sellable:
        raise PolicyViolationError(
            EQUIPMENT_NOT_SELLABLE,
            f"Equipment {equipment.id} is not on a store point floor",
            equipment_id=equipment.id,
        )

    combined = pricing_service.total_markup(equipment.supplier_markup, request.seller_markup)
    if combined > pricing_service.MAX_TOTAL_MARKUP:
        percentage = pricing_service.markup_percentage(combined)
        raise PolicyViolationError(
            MARKUP_EXCEEDED,
            f"Combined markup ({percentage}%) exceeds the maximum allowed (30%)",
            equipment_id=equipment.id,
            percentage=percentage,
        )
    return equipment


def _create_sale_locked(
    session,
    seller_id: int,
    store_point_id: int,
    payment_type: str,
    items: list[SaleItemRequest],
    cash_register_id: int | None,
) -> Sale:
    seller = session.get(Seller, seller_id)
    if not seller:
        raise NotFoundError("Seller", seller_id)

    store_point = session.get(StorePoint, store_point_id)
    if not store_point:
        raise NotFoundError("StorePoint", store_point_id)

    if payment_type == PAYMENT_CASHLESS and not store_point.can_process_cashless:
        raise PolicyViolationError(
            CASHLESS_NOT_SUPPORTED,
            f"Store point {store_point_id} cannot process cashless payments",
            store_point_id=store_point_id,
        )

    register = None
    if payment_type == PAYMENT_CASH:
        register = _require_register(session, store_point_id, cash_register_id)
    else:
        # Cashless sales never reference a register
        cash_register_id = None

    seen: set[int] = set()
    priced: list[tuple[Equipment, pricing_service.PriceBreakdown]] = []
    for request in items:
        if request.equipment_id in seen:
            raise ConflictError(
                ALREADY_SOLD,
                f"Equipment {request.equipment_id} appears more than once in the sale",
                equipment_id=request.equipment_id,
            )
        seen.add(request.equipment_id)

        equipment = _load_sellable_equipment(session, request)
        breakdown = pricing_service.calculate_item_price(
            equipment.purchase_price,
            equipment.supplier_markup,
            request.seller_markup,
            payment_type,
        )
        priced.append((equipment, breakdown))

    totals = pricing_service.summarize(b for _, b in priced)
    now = utcnow()

    if register is not None:
        check = cash_limit_service.evaluate(register, totals.total_with_sales_tax, now)
        if check.exceeded:
            raise _CashLimitBreach(check)

    sale = Sale(
        sale_date=now,
        seller_id=seller_id,
        store_point_id=store_point_id,
        payment_type=payment_type,
        cash_register_id=cash_register_id,
        total_amount=totals.total_amount,
        total_with_vat=totals.total_with_vat,
        total_with_sales_tax=totals.total_with_sales_tax,
    )
    if payment_type == PAYMENT_CASH:
        sale.check_number = generate_document_number(payment_type, now)
    else:
        sale.payment_order_number = generate_document_number(payment_type, now)
    session.add(sale)
    session.flush()

    for equipment, breakdown in priced:
        equipment.is_sold = True
        equipment.sold_at = now
        session.add(SaleItem(
            sale_id=sale.id,
            equipment_id=equipment.id,
            purchase_price=breakdown.purchase_price,
            supplier_markup=breakdown.supplier_markup,
            seller_markup=breakdown.seller_markup,
            price_before_taxes=breakdown.price_before_taxes,
            vat=breakdown.vat,
            sales_tax=breakdown.sales_tax,
            final_price=breakdown.final_price,
        ))

    session.flush()
    return sale


def create_sale(
    seller_id: int,
    store_point_id: int,
    payment_type: str,
    items: Iterable[SaleItemRequest | Mapping],
    cash_register_id: int | None = None,
    *,
    retry_attempts: int = 3,
) -> Sale:
    """
    Validate, price and commit one sale.

    Args:
        seller_id: Seller ringing up the sale
        store_point_id: Store point where the sale happens
        payment_type: "CASH" or "CASHLESS"
        items: [{"equipment_id": int, "seller_markup": 0..1}, ...]
        cash_register_id: Register for cash sales (ignored for cashless)

    Raises:
        ValidationError: malformed request
        NotFoundError: seller, store point, register or equipment missing
        PolicyViolationError: cashless unsupported, register missing,
            unit not on a floor, markup above 30%, cash limit exceeded
        ConflictError: unit already sold
    """
    if payment_type not in PAYMENT_TYPES:
        raise ValidationError(
            f"payment_type must be one of {', '.join(PAYMENT_TYPES)}",
            {"payment_type": payment_type},
        )
    requests = _normalize_items(items)

    def _op() -> Sale:
        with transaction_scope() as session:
            return _create_sale_locked(
                session, seller_id, store_point_id, payment_type, requests, cash_register_id,
            )

    try:
        return run_with_retry(_op, attempts=retry_attempts)
    except _CashLimitBreach as breach:
        # The sale transaction is already rolled back; audit the attempt on its own,
        # once per register per day.
        check = breach.check
        cash_limit_service.record_violation_once(
            cash_register_id=check.register_id,
            limit_amount=check.limit,
            actual_amount=check.projected,
        )
        raise PolicyViolationError(
            CASH_LIMIT_EXCEEDED,
            (
                f"Cash register limit exceeded. Limit: {money_str(check.limit)}, "
                f"today: {money_str(check.day_total)}, sale: {money_str(check.sale_total)}, "
                f"total: {money_str(check.projected)}"
            ),
            cash_register_id=check.register_id,
            limit=money_str(check.limit),
            attempted=money_str(check.projected),
        ) from None


def get_sale(sale_id: int) -> Sale:
    sale = db.session.get(Sale, sale_id)
    if not sale:
        raise NotFoundError("Sale", sale_id)
    return sale


def get_sale_items(sale_id: int) -> list[SaleItem]:
    return db.session.query(SaleItem).filter_by(sale_id=sale_id).order_by(SaleItem.id).all()
