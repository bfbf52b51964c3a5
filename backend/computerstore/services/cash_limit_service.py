# Overview: Daily cash-limit accounting per register and violation audit records.

"""
Cash limit guard.

A register's daily total is the sum of total_with_sales_tax over sales
recorded on that register during one calendar day (UTC). Exceeding the
register's cash_limit produces a CashLimitViolation audit record.

Violation records written for rejected sales are committed in their own
transaction, after the sale's transaction has been rolled back, so the audit
trail survives the rollback. Both the sale path and the daily reconciliation
keep at most one record per register per calendar day; record_violation
writes unconditionally.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func

from ..errors import NotFoundError
from ..extensions import db
from ..models import CashLimitViolation, CashRegister, Sale
from ..money import ZERO
from computerstore.time_utils import day_bounds, utcnow
from .concurrency import lock_for_update, transaction_scope


@dataclass(frozen=True)
class CashLimitCheck:
    register_id: int
    limit: Decimal
    day_total: Decimal
    sale_total: Decimal

    @property
    def projected(self) -> Decimal:
        return self.day_total + self.sale_total

    @property
    def exceeded(self) -> bool:
        return self.projected > self.limit


def daily_cash_total(cash_register_id: int, on_date: date | datetime) -> Decimal:
    """Sum of total_with_sales_tax for the register's sales on that day."""
    start, end = day_bounds(on_date)
    total = (
        db.session.query(func.coalesce(func.sum(Sale.total_with_sales_tax), 0))
        .filter(
            Sale.cash_register_id == cash_register_id,
            Sale.sale_date >= start,
            Sale.sale_date < end,
        )
        .scalar()
    )
    return Decimal(str(total)) if total is not None else ZERO


def evaluate(register: CashRegister, sale_total: Decimal, on_date: date | datetime) -> CashLimitCheck:
    """Project the register's day total with an additional sale amount."""
    return CashLimitCheck(
        register_id=register.id,
        limit=register.cash_limit,
        day_total=daily_cash_total(register.id, on_date),
        sale_total=sale_total,
    )


def has_violation_on(cash_register_id: int, on_date: date | datetime) -> bool:
    start, end = day_bounds(on_date)
    return db.session.query(
        db.session.query(CashLimitViolation)
        .filter(
            CashLimitViolation.cash_register_id == cash_register_id,
            CashLimitViolation.violation_date >= start,
            CashLimitViolation.violation_date < end,
        )
        .exists()
    ).scalar()


def record_violation(
    cash_register_id: int,
    limit_amount: Decimal,
    actual_amount: Decimal,
    violation_date: datetime | None = None,
) -> CashLimitViolation:
    """
    Persist a violation as its own committed unit of work.

    Must be called outside any open sale transaction.
    """
    with transaction_scope() as session:
        violation = CashLimitViolation(
            cash_register_id=cash_register_id,
            violation_date=violation_date or utcnow(),
            limit_amount=limit_amount,
            actual_amount=actual_amount,
        )
        session.add(violation)
    return violation


def record_violation_once(
    cash_register_id: int,
    limit_amount: Decimal,
    actual_amount: Decimal,
    violation_date: datetime | None = None,
) -> CashLimitViolation | None:
    """
    Persist a violation unless the register already has one for that day.

    Used for rejected sales: repeated overage attempts on one register keep a
    single record per calendar day. The register row is locked so concurrent
    rejections cannot both insert. Must be called outside any open sale
    transaction.
    """
    violation_date = violation_date or utcnow()
    with transaction_scope() as session:
        lock_for_update(session.query(CashRegister).filter_by(id=cash_register_id)).first()
        if has_violation_on(cash_register_id, violation_date):
            return None
        violation = CashLimitViolation(
            cash_register_id=cash_register_id,
            violation_date=violation_date,
            limit_amount=limit_amount,
            actual_amount=actual_amount,
        )
        session.add(violation)
    return violation


def check_and_record_cash_limit_violation(
    cash_register_id: int,
    on_date: date | datetime,
) -> CashLimitViolation | None:
    """
    Reconcile one register's day against its limit.

    Inserts a violation when the day total exceeds the limit and none exists
    yet for that register and day. Returns the new record, or None when
    nothing was written. The register row is locked for the duration so two
    reconciliations of the same register serialize.
    """
    if not isinstance(on_date, datetime):
        on_date = datetime(on_date.year, on_date.month, on_date.day)

    with transaction_scope() as session:
        register = lock_for_update(
            session.query(CashRegister).filter_by(id=cash_register_id)
        ).first()
        if not register:
            raise NotFoundError("CashRegister", cash_register_id)

        day_total = daily_cash_total(cash_register_id, on_date)
        if day_total <= register.cash_limit:
            return None

        if has_violation_on(cash_register_id, on_date):
            return None

        violation = CashLimitViolation(
            cash_register_id=cash_register_id,
            violation_date=on_date,
            limit_amount=register.cash_limit,
            actual_amount=day_total,
        )
        session.add(violation)

    return violation


def list_violations(cash_register_id: int | None = None) -> list[CashLimitViolation]:
    query = db.session.query(CashLimitViolation)
    if cash_register_id is not None:
        query = query.filter_by(cash_register_id=cash_register_id)
    return query.order_by(CashLimitViolation.violation_date.desc(), CashLimitViolation.id.desc()).all()
