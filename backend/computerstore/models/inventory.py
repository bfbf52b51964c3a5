from __future__ import annotations

from ..extensions import db
from ..money import money_str, fraction_str
from computerstore.time_utils import to_utc_z


class Supplier(db.Model):
    __tablename__ = "suppliers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(500), nullable=False, default="")
    phone = db.Column(db.String(20), nullable=False, default="")
    contact_person = db.Column(db.String(200), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "contact_person": self.contact_person,
        }


class Equipment(db.Model):
    """
    One physical unit of sellable equipment.

    LOCATION: either on the central warehouse (is_on_central_warehouse=True,
    store_point_id NULL) or on a store point floor. Only floor units can be
    sold; warehouse units must be transferred first.

    IMMUTABLE: once is_sold is set the unit never changes again.
    version_id guards the sold flag against concurrent sales.
    """
    __tablename__ = "equipment"
    __table_args__ = (
        db.Index("ix_equipment_name", "name"),
        db.Index("ix_equipment_store_point_sold", "store_point_id", "is_sold"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    purchase_price = db.Column(db.Numeric(18, 2), nullable=False)
    supplier_markup = db.Column(db.Numeric(5, 4), nullable=False)
    receipt_date = db.Column(db.DateTime, nullable=False)
    invoice_number = db.Column(db.String(50), nullable=False, default="")
    warranty_months = db.Column(db.Integer, nullable=False, default=0)

    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), nullable=False, index=True)
    store_point_id = db.Column(db.Integer, db.ForeignKey("store_points.id"), nullable=True)
    is_on_central_warehouse = db.Column(db.Boolean, nullable=False, default=True)

    is_sold = db.Column(db.Boolean, nullable=False, default=False, index=True)
    sold_at = db.Column(db.DateTime, nullable=True)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    supplier = db.relationship("Supplier", backref=db.backref("equipment", lazy=True))
    store_point = db.relationship("StorePoint", backref=db.backref("equipment", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_sellable(self) -> bool:
        return (
            not self.is_sold
            and not self.is_on_central_warehouse
            and self.store_point_id is not None
        )

    @property
    def location_label(self) -> str:
        if self.is_on_central_warehouse:
            return "Центральный склад"
        if self.store_point is not None:
            return self.store_point.name
        return "Неизвестно"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "purchase_price": money_str(self.purchase_price),
            "supplier_markup": fraction_str(self.supplier_markup),
            "receipt_date": to_utc_z(self.receipt_date),
            "invoice_number": self.invoice_number,
            "warranty_months": self.warranty_months,
            "supplier_id": self.supplier_id,
            "store_point_id": self.store_point_id,
            "is_on_central_warehouse": self.is_on_central_warehouse,
            "is_sold": self.is_sold,
            "sold_at": to_utc_z(self.sold_at) if self.sold_at else None,
            "version_id": self.version_id,
        }
