# Overview: Idempotent demo data for a fresh database.

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

from ..extensions import db
from ..models import CashRegister, Equipment, Seller, SellerWorkSchedule, StorePoint, Supplier
from computerstore.time_utils import utcnow


SUPPLIERS = [
    ("ООО 'Комп-Сервис'", "г. Москва, ул. Ленина, д. 10", "+7 (495) 123-45-67", "Иванов И.И."),
    ("ЗАО 'ТехноМир'", "г. Санкт-Петербург, пр. Невский, д. 25", "+7 (812) 987-65-43", "Петров П.П."),
    ("ИП Сидоров", "г. Казань, ул. Баумана, д. 5", "+7 (843) 555-12-34", "Сидоров С.С."),
]

STORE_POINTS = [
    # name, address, cashless, (register number, cash limit)
    ("Магазин 'Центральный'", "г. Москва, ул. Тверская, д. 15", True, ("KKT-001", "500000.00")),
    ("Магазин 'Северный'", "г. Москва, ул. Полярная, д. 8", True, ("KKT-002", "300000.00")),
    ("Магазин 'Южный'", "г. Москва, ул. Южная, д. 22", False, ("KKT-003", "200000.00")),
]

SELLERS = [
    ("Анна", "Смирнова", "Сергеевна", "+7 (916) 111-22-33"),
    ("Дмитрий", "Кузнецов", "Олегович", "+7 (916) 444-55-66"),
    ("Елена", "Попова", "Игоревна", "+7 (916) 777-88-99"),
]

EQUIPMENT = [
    # name, purchase price, supplier markup, warranty months
    ("Ноутбук Lenovo IdeaPad 5", "55000.00", "0.15", 12),
    ("Монитор Dell 27\"", "18000.00", "0.12", 24),
    ("SSD Samsung 1TB", "7500.00", "0.10", 36),
    ("Видеокарта RTX 4060", "32000.00", "0.18", 24),
    ("Клавиатура Logitech K120", "900.00", "0.20", 12),
]


def seed_demo_data() -> bool:
    """Populate an empty database. Returns False when suppliers already exist."""
    if db.session.query(Supplier).first() is not None:
        return False

    suppliers = [
        Supplier(name=name, address=address, phone=phone, contact_person=contact)
        for name, address, phone, contact in SUPPLIERS
    ]
    db.session.add_all(suppliers)

    store_points = []
    for name, address, cashless, (reg_number, limit) in STORE_POINTS:
        store_point = StorePoint(name=name, address=address, can_process_cashless=cashless)
        store_point.cash_registers.append(
            CashRegister(registration_number=reg_number, cash_limit=Decimal(limit))
        )
        store_points.append(store_point)
    db.session.add_all(store_points)

    sellers = [
        Seller(first_name=first, last_name=last, middle_name=middle, phone=phone)
        for first, last, middle, phone in SELLERS
    ]
    db.session.add_all(sellers)
    db.session.flush()

    now = utcnow()
    for index, (name, price, markup, warranty) in enumerate(EQUIPMENT):
        supplier = suppliers[index % len(suppliers)]
        # one unit in the central warehouse, one on each store floor
        locations = [None] + [sp.id for sp in store_points]
        for store_point_id in locations:
            db.session.add(Equipment(
                name=name,
                purchase_price=Decimal(price),
                supplier_markup=Decimal(markup),
                receipt_date=now - timedelta(days=10 + index),
                invoice_number=f"INV-{index + 1:04d}",
                warranty_months=warranty,
                supplier_id=supplier.id,
                store_point_id=store_point_id,
                is_on_central_warehouse=store_point_id is None,
            ))

    today = now.date()
    for offset in range(7):
        for seller, store_point in zip(sellers, store_points):
            db.session.add(SellerWorkSchedule(
                seller_id=seller.id,
                store_point_id=store_point.id,
                work_date=today + timedelta(days=offset),
                start_time=time(9, 0),
                end_time=time(18, 0),
            ))

    db.session.commit()
    return True
