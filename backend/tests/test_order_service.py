# Overview: Pytest coverage for customer order intake and weekly supplier orders.

from datetime import datetime, timedelta

import pytest

from computerstore.errors import NotFoundError, ValidationError
from computerstore.models import CustomerOrder, Supplier, SupplierOrder
from computerstore.services import order_service


WEEK_START = datetime(2026, 10, 12)


@pytest.fixture
def add_order(db_session, seller):
    def _add(name, quantity, order_date=None, processed=False):
        order = CustomerOrder(
            seller_id=seller.id,
            order_date=order_date or WEEK_START + timedelta(days=1),
            equipment_name=name,
            quantity=quantity,
            notes="",
            is_processed=processed,
        )
        db_session.add(order)
        db_session.commit()
        return order
    return _add


class TestCreateCustomerOrder:
    def test_creates_unprocessed_order(self, db_session, seller):
        order = order_service.create_customer_order(seller.id, "  SSD 1TB ", 2, notes="позвонить")

        assert order.equipment_name == "SSD 1TB"
        assert order.quantity == 2
        assert order.is_processed is False
        assert order.order_date is not None

    def test_unknown_seller(self, db_session):
        with pytest.raises(NotFoundError):
            order_service.create_customer_order(404, "SSD 1TB", 1)

    @pytest.mark.parametrize("name,quantity", [("", 1), ("SSD", 0), ("SSD", -2)])
    def test_invalid_input(self, db_session, seller, name, quantity):
        with pytest.raises(ValidationError):
            order_service.create_customer_order(seller.id, name, quantity)


class TestGenerateWeeklySupplierOrders:
    def test_groups_orders_by_name(self, db_session, supplier, make_equipment, add_order):
        make_equipment(name="SSD 1TB")
        first = add_order("SSD 1TB", 2)
        second = add_order("SSD 1TB", 3, order_date=WEEK_START + timedelta(days=4))

        orders = order_service.generate_weekly_supplier_orders(WEEK_START)

        assert len(orders) == 1
        order = orders[0]
        assert order.supplier_id == supplier.id
        assert order.order_details == "SSD 1TB - 5 шт. (Заказов: 2)"
        assert order.week_start_date == WEEK_START
        assert order.week_end_date == WEEK_START + timedelta(days=7)
        assert order.is_completed is False
        assert db_session.get(CustomerOrder, first.id).is_processed is True
        assert db_session.get(CustomerOrder, second.id).is_processed is True

    def test_one_supplier_order_per_name(self, db_session, supplier, add_order):
        add_order("SSD 1TB", 1)
        add_order("Монитор 27", 4)
        add_order("SSD 1TB", 1)

        orders = order_service.generate_weekly_supplier_orders(WEEK_START.date())

        details = sorted(o.order_details for o in orders)
        assert details == sorted([
            "Монитор 27 - 4 шт. (Заказов: 1)",
            "SSD 1TB - 2 шт. (Заказов: 2)",
        ])

    def test_prefers_supplier_that_delivered_the_name(self, db_session, supplier, make_equipment, add_order):
        other = Supplier(name="ЗАО 'ТехноМир'")
        db_session.add(other)
        db_session.commit()
        unit = make_equipment(name="Видеокарта RTX 4060")
        unit.supplier_id = other.id
        db_session.commit()
        add_order("Видеокарта RTX 4060", 1)

        orders = order_service.generate_weekly_supplier_orders(WEEK_START)

        assert orders[0].supplier_id == other.id

    def test_falls_back_to_first_supplier(self, db_session, supplier, add_order):
        add_order("Неизвестный товар", 1)

        orders = order_service.generate_weekly_supplier_orders(WEEK_START)

        assert orders[0].supplier_id == supplier.id

    def test_no_suppliers_writes_nothing(self, db_session, add_order):
        order = add_order("SSD 1TB", 1)

        assert order_service.generate_weekly_supplier_orders(WEEK_START) == []
        assert db_session.query(SupplierOrder).count() == 0
        assert db_session.get(CustomerOrder, order.id).is_processed is False

    def test_window_is_half_open_and_skips_processed(self, db_session, supplier, add_order):
        add_order("SSD 1TB", 1, order_date=WEEK_START - timedelta(seconds=1))
        add_order("SSD 1TB", 1, order_date=WEEK_START + timedelta(days=7))
        add_order("SSD 1TB", 1, processed=True)
        inside = add_order("SSD 1TB", 7, order_date=WEEK_START)

        orders = order_service.generate_weekly_supplier_orders(WEEK_START)

        assert [o.order_details for o in orders] == ["SSD 1TB - 7 шт. (Заказов: 1)"]
        assert db_session.get(CustomerOrder, inside.id).is_processed is True
        assert db_session.query(CustomerOrder).filter_by(is_processed=False).count() == 2

    def test_empty_week(self, db_session, supplier):
        assert order_service.generate_weekly_supplier_orders(WEEK_START) == []

    def test_second_run_finds_nothing(self, db_session, supplier, add_order):
        add_order("SSD 1TB", 2)
        order_service.generate_weekly_supplier_orders(WEEK_START)

        assert order_service.generate_weekly_supplier_orders(WEEK_START) == []
        assert db_session.query(SupplierOrder).count() == 1
        assert len(order_service.list_supplier_orders(WEEK_START)) == 1
