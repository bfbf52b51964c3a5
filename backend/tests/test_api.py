"""
HTTP API tests for the computer store backend.

Verifies:
- Sales endpoint status codes (201, 400, 404, 409, 422)
- Cash limit rejection leaves an audit record
- Equipment intake and transfer
- Customer orders and weekly supplier orders
- Reports and health
"""

from computerstore.errors import CASH_LIMIT_EXCEEDED, CASHLESS_NOT_SUPPORTED, MARKUP_EXCEEDED
from computerstore.models import CashLimitViolation, Equipment
from computerstore.time_utils import current_week_start, utcnow


def _sale_body(seller, store_point, equipment, payment_type="CASH", register=None, seller_markup="0.10"):
    body = {
        "seller_id": seller.id,
        "store_point_id": store_point.id,
        "payment_type": payment_type,
        "items": [{"equipment_id": equipment.id, "seller_markup": seller_markup}],
    }
    if register is not None:
        body["cash_register_id"] = register.id
    return body


# =============================================================================
# SALES
# =============================================================================


class TestSalesApi:

    def test_cash_sale_created(self, client, seller, store_point, register, make_equipment):
        unit = make_equipment()

        resp = client.post("/api/sales", json=_sale_body(seller, store_point, unit, register=register))

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["sale"]["check_number"].startswith("CHK-")
        assert data["sale"]["payment_order_number"] is None
        assert data["sale"]["total_with_sales_tax"] == "123900.00"
        assert data["items"][0]["final_price"] == "123900.00"

    def test_get_sale(self, client, seller, store_point, register, make_equipment):
        unit = make_equipment()
        created = client.post("/api/sales", json=_sale_body(seller, store_point, unit, register=register))
        sale_id = created.get_json()["sale"]["id"]

        resp = client.get(f"/api/sales/{sale_id}")

        assert resp.status_code == 200
        assert resp.get_json()["items"][0]["equipment_id"] == unit.id

    def test_get_missing_sale(self, client, db_session):
        resp = client.get("/api/sales/999")
        assert resp.status_code == 404
        assert resp.get_json()["kind"] == "NOT_FOUND"

    def test_missing_field(self, client, seller, store_point):
        resp = client.post("/api/sales", json={"seller_id": seller.id, "store_point_id": store_point.id})
        assert resp.status_code == 400

    def test_unknown_equipment(self, client, seller, store_point, register, db_session):
        body = {
            "seller_id": seller.id,
            "store_point_id": store_point.id,
            "payment_type": "CASH",
            "cash_register_id": register.id,
            "items": [{"equipment_id": 4242, "seller_markup": "0.05"}],
        }
        resp = client.post("/api/sales", json=body)
        assert resp.status_code == 404

    def test_double_sale_conflict(self, client, seller, store_point, register, make_equipment):
        unit = make_equipment(purchase_price="1000.00")
        body = _sale_body(seller, store_point, unit, register=register)

        assert client.post("/api/sales", json=body).status_code == 201
        resp = client.post("/api/sales", json=body)

        assert resp.status_code == 409
        assert resp.get_json()["kind"] == "ALREADY_SOLD"

    def test_markup_exceeded(self, client, seller, store_point, register, make_equipment):
        unit = make_equipment(supplier_markup="0.25")

        resp = client.post(
            "/api/sales",
            json=_sale_body(seller, store_point, unit, register=register, seller_markup="0.10"),
        )

        assert resp.status_code == 422
        data = resp.get_json()
        assert data["kind"] == MARKUP_EXCEEDED
        assert data["details"]["percentage"] == "35.00"

    def test_cashless_not_supported(self, client, seller, cash_only_store_point, make_equipment):
        unit = make_equipment(store_point_id=cash_only_store_point.id)

        resp = client.post(
            "/api/sales",
            json=_sale_body(seller, cash_only_store_point, unit, payment_type="CASHLESS"),
        )

        assert resp.status_code == 422
        assert resp.get_json()["kind"] == CASHLESS_NOT_SUPPORTED

    def test_cash_limit_rejected_and_audited(self, client, db_session, seller, store_point, register,
                                             make_equipment, make_cash_sale):
        make_cash_sale("195000.00")
        unit = make_equipment(purchase_price="7000.00", supplier_markup="0.10")

        resp = client.post(
            "/api/sales",
            json=_sale_body(seller, store_point, unit, register=register, seller_markup="0.10"),
        )

        assert resp.status_code == 422
        data = resp.get_json()
        assert data["kind"] == CASH_LIMIT_EXCEEDED
        assert data["details"]["limit"] == "200000.00"
        assert db_session.query(CashLimitViolation).count() == 1
        assert db_session.get(Equipment, unit.id).is_sold is False


# =============================================================================
# CASH REGISTERS
# =============================================================================


class TestRegistersApi:

    def test_check_records_once(self, client, register, make_cash_sale):
        make_cash_sale("150000.00")
        make_cash_sale("60000.00")

        first = client.post(f"/api/registers/{register.id}/cash-limit-check", json={})
        second = client.post(f"/api/registers/{register.id}/cash-limit-check", json={})

        assert first.status_code == 200
        assert first.get_json()["recorded"] is True
        assert first.get_json()["violation"]["actual_amount"] == "210000.00"
        assert second.get_json() == {"violation": None, "recorded": False}

        listed = client.get(f"/api/registers/{register.id}/violations")
        assert len(listed.get_json()["violations"]) == 1

    def test_unknown_register(self, client, db_session):
        resp = client.post("/api/registers/777/cash-limit-check", json={})
        assert resp.status_code == 404


# =============================================================================
# EQUIPMENT
# =============================================================================


class TestEquipmentApi:

    def test_receive_then_transfer(self, client, supplier, store_point):
        resp = client.post("/api/equipment", json={
            "supplier_id": supplier.id,
            "name": "Монитор Dell 27\"",
            "purchase_price": "18000.00",
            "supplier_markup": "0.12",
            "warranty_months": 24,
        })
        assert resp.status_code == 201
        equipment = resp.get_json()["equipment"]
        assert equipment["is_on_central_warehouse"] is True

        moved = client.post(
            f"/api/equipment/{equipment['id']}/transfer",
            json={"store_point_id": store_point.id},
        )
        assert moved.status_code == 200
        assert moved.get_json() == {"transferred": True}

        fetched = client.get(f"/api/equipment/{equipment['id']}").get_json()["equipment"]
        assert fetched["store_point_id"] == store_point.id
        assert fetched["is_on_central_warehouse"] is False

    def test_transfer_missing_unit(self, client, store_point):
        resp = client.post("/api/equipment/9999/transfer", json={"store_point_id": store_point.id})
        assert resp.status_code == 409
        assert resp.get_json() == {"transferred": False}

    def test_transfer_requires_store_point(self, client, make_equipment):
        unit = make_equipment(on_warehouse=True)
        resp = client.post(f"/api/equipment/{unit.id}/transfer", json={})
        assert resp.status_code == 400

    def test_receive_invalid_markup(self, client, supplier):
        resp = client.post("/api/equipment", json={
            "supplier_id": supplier.id,
            "name": "SSD",
            "purchase_price": "7500.00",
            "supplier_markup": "1.50",
        })
        assert resp.status_code == 400


# =============================================================================
# ORDERS
# =============================================================================


class TestOrdersApi:

    def test_customer_orders_fold_into_weekly_order(self, client, seller, supplier, make_equipment):
        make_equipment(name="SSD Samsung 1TB")
        for quantity in (2, 3):
            resp = client.post("/api/customer-orders", json={
                "seller_id": seller.id,
                "equipment_name": "SSD Samsung 1TB",
                "quantity": quantity,
            })
            assert resp.status_code == 201

        week_start = current_week_start()
        resp = client.post("/api/supplier-orders/weekly", json={"week_start": f"{week_start:%Y-%m-%d}"})

        assert resp.status_code == 201
        orders = resp.get_json()["supplier_orders"]
        assert len(orders) == 1
        assert orders[0]["supplier_id"] == supplier.id
        assert orders[0]["order_details"] == "SSD Samsung 1TB - 5 шт. (Заказов: 2)"

    def test_customer_order_rejects_zero_quantity(self, client, seller):
        resp = client.post("/api/customer-orders", json={
            "seller_id": seller.id,
            "equipment_name": "SSD",
            "quantity": 0,
        })
        assert resp.status_code == 400

    def test_weekly_requires_week_start(self, client, db_session):
        resp = client.post("/api/supplier-orders/weekly", json={})
        assert resp.status_code == 400


# =============================================================================
# REPORTS / HEALTH
# =============================================================================


class TestReportsApi:

    def test_health(self, client, db_session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok"}

    def test_revenue_requires_range(self, client, db_session):
        resp = client.get("/api/reports/revenue")
        assert resp.status_code == 400

    def test_revenue(self, client, seller, store_point, register, make_equipment):
        unit = make_equipment()
        client.post("/api/sales", json=_sale_body(seller, store_point, unit, register=register))
        today = utcnow().date()

        resp = client.get(f"/api/reports/revenue?start={today}&end={today}T23:59:59")

        assert resp.status_code == 200
        assert resp.get_json()["report"]["cash_revenue"] == "123900.00"

    def test_bad_month(self, client, db_session):
        resp = client.get("/api/reports/monthly?month=13&year=2026")
        assert resp.status_code == 400

    def test_total_warehouse(self, client, make_equipment):
        make_equipment(name="Клавиатура Logitech K120", on_warehouse=True)

        resp = client.get("/api/reports/total-warehouse")

        assert resp.status_code == 200
        assert resp.get_json()["report"][0]["location"] == "Центральный склад"
