"""
Pytest fixtures for computer store backend tests.

Provides an in-memory database, a function-scoped clean session, entity
fixtures and a test client.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from computerstore import create_app
from computerstore.extensions import db
from computerstore.models import (
    PAYMENT_CASH,
    CashRegister,
    Equipment,
    Sale,
    Seller,
    StorePoint,
    Supplier,
)
from computerstore.time_utils import utcnow


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SALE_RETRY_ATTEMPTS': 1,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        db.session.rollback()
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def supplier(db_session):
    supplier = Supplier(name="ООО 'Комп-Сервис'", address="Москва", phone="+7", contact_person="Иванов И.И.")
    db_session.add(supplier)
    db_session.commit()
    return supplier


@pytest.fixture(scope='function')
def store_point(db_session):
    """Store point accepting both cash and cashless payments."""
    store_point = StorePoint(name="Центральный", address="Тверская, 15", can_process_cashless=True)
    db_session.add(store_point)
    db_session.commit()
    return store_point


@pytest.fixture(scope='function')
def cash_only_store_point(db_session):
    store_point = StorePoint(name="Южный", address="Южная, 22", can_process_cashless=False)
    db_session.add(store_point)
    db_session.commit()
    return store_point


@pytest.fixture(scope='function')
def register(db_session, store_point):
    """Register with a 200 000 daily cash limit."""
    register = CashRegister(
        registration_number="KKT-001",
        cash_limit=Decimal("200000.00"),
        store_point_id=store_point.id,
    )
    db_session.add(register)
    db_session.commit()
    return register


@pytest.fixture(scope='function')
def seller(db_session):
    seller = Seller(first_name="Анна", last_name="Смирнова", middle_name="Сергеевна", phone="+7")
    db_session.add(seller)
    db_session.commit()
    return seller


@pytest.fixture(scope='function')
def make_equipment(db_session, supplier, store_point):
    """Factory for equipment units; on the store point floor by default."""
    def _make(
        name="Ноутбук Lenovo",
        purchase_price="80000.00",
        supplier_markup="0.15",
        store_point_id=...,
        on_warehouse=False,
        receipt_date=None,
    ):
        if store_point_id is ...:
            store_point_id = None if on_warehouse else store_point.id
        equipment = Equipment(
            name=name,
            purchase_price=Decimal(purchase_price),
            supplier_markup=Decimal(supplier_markup),
            receipt_date=receipt_date or utcnow() - timedelta(days=3),
            invoice_number="INV-0001",
            warranty_months=12,
            supplier_id=supplier.id,
            store_point_id=store_point_id,
            is_on_central_warehouse=on_warehouse,
        )
        db_session.add(equipment)
        db_session.commit()
        return equipment

    return _make


@pytest.fixture(scope='function')
def make_cash_sale(db_session, seller, store_point, register):
    """Insert an already-committed cash sale total on the register (no items)."""
    counter = {"n": 0}

    def _make(total_with_sales_tax, sale_date=None):
        counter["n"] += 1
        total = Decimal(total_with_sales_tax)
        sale = Sale(
            sale_date=sale_date or utcnow(),
            seller_id=seller.id,
            store_point_id=store_point.id,
            payment_type=PAYMENT_CASH,
            check_number=f"CHK-TEST-{counter['n']:04d}",
            cash_register_id=register.id,
            total_amount=total,
            total_with_vat=total,
            total_with_sales_tax=total,
        )
        db_session.add(sale)
        db_session.commit()
        return sale

    return _make
