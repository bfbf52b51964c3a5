from __future__ import annotations

from ..extensions import db
from computerstore.time_utils import to_utc_z


class CustomerOrder(db.Model):
    """
    Customer request for equipment that is not in stock, logged by a seller.

    LIFECYCLE: is_processed flips to True once the order is folded into a
    weekly SupplierOrder.
    """
    __tablename__ = "customer_orders"
    __table_args__ = (
        db.Index("ix_customer_orders_processed_date", "is_processed", "order_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime, nullable=False)
    equipment_name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    notes = db.Column(db.String(1000), nullable=False, default="")
    is_processed = db.Column(db.Boolean, nullable=False, default=False)

    seller = db.relationship("Seller", backref=db.backref("customer_orders", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "order_date": to_utc_z(self.order_date),
            "equipment_name": self.equipment_name,
            "quantity": self.quantity,
            "notes": self.notes,
            "is_processed": self.is_processed,
        }


class SupplierOrder(db.Model):
    """Weekly order to a supplier aggregating customer orders for one product name."""
    __tablename__ = "supplier_orders"
    __table_args__ = (
        db.Index("ix_supplier_orders_week", "week_start_date", "week_end_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime, nullable=False)
    week_start_date = db.Column(db.DateTime, nullable=False)
    week_end_date = db.Column(db.DateTime, nullable=False)
    order_details = db.Column(db.String(2000), nullable=False)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)

    supplier = db.relationship("Supplier", backref=db.backref("supplier_orders", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "supplier_id": self.supplier_id,
            "order_date": to_utc_z(self.order_date),
            "week_start_date": to_utc_z(self.week_start_date),
            "week_end_date": to_utc_z(self.week_end_date),
            "order_details": self.order_details,
            "is_completed": self.is_completed,
        }
