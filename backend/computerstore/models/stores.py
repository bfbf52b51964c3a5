from __future__ import annotations

from ..extensions import db
from ..money import money_str


class StorePoint(db.Model):
    """
    Retail store point (sales floor).

    Equipment is sellable only once it sits on a store point. A store point
    may or may not be able to accept cashless payments.
    """
    __tablename__ = "store_points"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(500), nullable=False, default="")
    can_process_cashless = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<StorePoint id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "can_process_cashless": self.can_process_cashless,
        }


class CashRegister(db.Model):
    """
    Fiscal cash register.

    cash_limit is the ceiling on same-day cumulative cash revenue
    (sum of Sale.total_with_sales_tax) for this register.
    """
    __tablename__ = "cash_registers"
    __table_args__ = (
        db.UniqueConstraint("registration_number", name="uq_cash_registers_regnum"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    registration_number = db.Column(db.String(50), nullable=False)
    cash_limit = db.Column(db.Numeric(18, 2), nullable=False)
    store_point_id = db.Column(db.Integer, db.ForeignKey("store_points.id"), nullable=False, index=True)

    store_point = db.relationship("StorePoint", backref=db.backref("cash_registers", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "registration_number": self.registration_number,
            "cash_limit": money_str(self.cash_limit),
            "store_point_id": self.store_point_id,
        }


class Seller(db.Model):
    __tablename__ = "sellers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100), nullable=False, default="")
    phone = db.Column(db.String(20), nullable=False, default="")

    @property
    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name} {self.middle_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "middle_name": self.middle_name,
            "full_name": self.full_name,
            "phone": self.phone,
        }


class SellerWorkSchedule(db.Model):
    """One shift of a seller at a store point."""
    __tablename__ = "seller_work_schedules"
    __table_args__ = (
        db.Index("ix_schedules_seller_date", "seller_id", "work_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=False)
    store_point_id = db.Column(db.Integer, db.ForeignKey("store_points.id"), nullable=False, index=True)
    work_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    seller = db.relationship("Seller", backref=db.backref("work_schedules", lazy=True))
    store_point = db.relationship("StorePoint", backref=db.backref("work_schedules", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "store_point_id": self.store_point_id,
            "work_date": self.work_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
        }
