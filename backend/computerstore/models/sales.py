from __future__ import annotations

from ..extensions import db
from ..money import money_str, fraction_str
from computerstore.time_utils import to_utc_z


PAYMENT_CASH = "CASH"
PAYMENT_CASHLESS = "CASHLESS"
PAYMENT_TYPES = (PAYMENT_CASH, PAYMENT_CASHLESS)


class Sale(db.Model):
    """
    Committed customer sale.

    PAYMENT TYPES:
    - CASH: goes through a cash register, numbered with a check number
      (CHK-...), pays sales tax on top of VAT
    - CASHLESS: no register, numbered with a payment-order number (PP-...),
      VAT only

    INVARIANT: totals are sums over the sale's items.
    IMMUTABLE: sales are never updated after commit.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint(
            "(check_number IS NULL) <> (payment_order_number IS NULL)",
            name="ck_sales_single_document_number",
        ),
        # Same-day cash total lookups per register
        db.Index("ix_sales_register_date", "cash_register_id", "sale_date"),
        db.Index("ix_sales_store_point_date", "store_point_id", "sale_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_date = db.Column(db.DateTime, nullable=False, index=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=False, index=True)
    store_point_id = db.Column(db.Integer, db.ForeignKey("store_points.id"), nullable=False)
    payment_type = db.Column(db.String(16), nullable=False)

    check_number = db.Column(db.String(50), nullable=True, unique=True)
    payment_order_number = db.Column(db.String(50), nullable=True, unique=True)
    cash_register_id = db.Column(db.Integer, db.ForeignKey("cash_registers.id"), nullable=True)

    total_amount = db.Column(db.Numeric(18, 2), nullable=False)
    total_with_vat = db.Column(db.Numeric(18, 2), nullable=False)
    total_with_sales_tax = db.Column(db.Numeric(18, 2), nullable=False)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    seller = db.relationship("Seller", backref=db.backref("sales", lazy=True))
    store_point = db.relationship("StorePoint", backref=db.backref("sales", lazy=True))
    cash_register = db.relationship("CashRegister", backref=db.backref("sales", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def document_number(self) -> str | None:
        return self.check_number or self.payment_order_number

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_date": to_utc_z(self.sale_date),
            "seller_id": self.seller_id,
            "store_point_id": self.store_point_id,
            "payment_type": self.payment_type,
            "check_number": self.check_number,
            "payment_order_number": self.payment_order_number,
            "cash_register_id": self.cash_register_id,
            "total_amount": money_str(self.total_amount),
            "total_with_vat": money_str(self.total_with_vat),
            "total_with_sales_tax": money_str(self.total_with_sales_tax),
            "version_id": self.version_id,
        }


class SaleItem(db.Model):
    """
    One equipment unit within a sale.

    purchase_price and supplier_markup are snapshots of the equipment at
    sale time; later edits to the equipment row do not change history.
    """
    __tablename__ = "sale_items"
    __table_args__ = (
        db.UniqueConstraint("equipment_id", name="uq_sale_items_equipment"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)
    equipment_id = db.Column(db.Integer, db.ForeignKey("equipment.id"), nullable=False)

    purchase_price = db.Column(db.Numeric(18, 2), nullable=False)
    supplier_markup = db.Column(db.Numeric(5, 4), nullable=False)
    seller_markup = db.Column(db.Numeric(5, 4), nullable=False)
    price_before_taxes = db.Column(db.Numeric(18, 2), nullable=False)
    vat = db.Column(db.Numeric(18, 2), nullable=False)
    sales_tax = db.Column(db.Numeric(18, 2), nullable=False)
    final_price = db.Column(db.Numeric(18, 2), nullable=False)

    sale = db.relationship("Sale", backref=db.backref("items", lazy=True))
    equipment = db.relationship("Equipment", backref=db.backref("sale_items", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_id": self.sale_id,
            "equipment_id": self.equipment_id,
            "purchase_price": money_str(self.purchase_price),
            "supplier_markup": fraction_str(self.supplier_markup),
            "seller_markup": fraction_str(self.seller_markup),
            "price_before_taxes": money_str(self.price_before_taxes),
            "vat": money_str(self.vat),
            "sales_tax": money_str(self.sales_tax),
            "final_price": money_str(self.final_price),
        }


class CashLimitViolation(db.Model):
    """
    Append-only audit record of a register exceeding its daily cash limit.

    Written both for rejected sales (actual_amount is the projected total the
    sale would have produced) and by the daily reconciliation check, at most
    one per register per calendar day.
    IMMUTABLE: records are never updated or deleted.
    """
    __tablename__ = "cash_limit_violations"
    __table_args__ = (
        db.Index("ix_violations_register_date", "cash_register_id", "violation_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    cash_register_id = db.Column(db.Integer, db.ForeignKey("cash_registers.id"), nullable=False)
    violation_date = db.Column(db.DateTime, nullable=False)
    limit_amount = db.Column(db.Numeric(18, 2), nullable=False)
    actual_amount = db.Column(db.Numeric(18, 2), nullable=False)

    cash_register = db.relationship("CashRegister", backref=db.backref("limit_violations", lazy=True))

    @property
    def excess_amount(self):
        return self.actual_amount - self.limit_amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cash_register_id": self.cash_register_id,
            "violation_date": to_utc_z(self.violation_date),
            "limit_amount": money_str(self.limit_amount),
            "actual_amount": money_str(self.actual_amount),
            "excess_amount": money_str(self.excess_amount),
        }
