# Overview: Flask API routes for customer orders and weekly supplier orders.

from flask import Blueprint, current_app, jsonify, request

from ..errors import StoreError, ValidationError
from ..services import order_service
from . import error_response, require_datetime, require_int


orders_bp = Blueprint("orders", __name__, url_prefix="/api")


@orders_bp.post("/customer-orders")
def create_customer_order_route():
    """
    Log a customer request for out-of-stock equipment.

    Request body:
    {
        "seller_id": int,
        "equipment_name": str,
        "quantity": int,
        "notes": str (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        for field in ("seller_id", "equipment_name", "quantity"):
            if field not in data:
                raise ValidationError(f"Missing required field: {field}")

        order = order_service.create_customer_order(
            seller_id=require_int(data["seller_id"], "seller_id"),
            equipment_name=data["equipment_name"],
            quantity=require_int(data["quantity"], "quantity"),
            notes=data.get("notes", ""),
        )
        return jsonify({"order": order.to_dict()}), 201

    except StoreError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create customer order")
        return jsonify({"error": "Internal server error"}), 500


@orders_bp.post("/supplier-orders/weekly")
def generate_weekly_supplier_orders_route():
    """
    Aggregate the week's unprocessed customer orders into supplier orders.

    Request body:
    {
        "week_start": "YYYY-MM-DD"
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        if not data.get("week_start"):
            raise ValidationError("Missing required field: week_start")
        week_start = require_datetime(data["week_start"], "week_start")
        orders = order_service.generate_weekly_supplier_orders(week_start)
    except StoreError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to generate weekly supplier orders")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info("Generated %s supplier orders for week of %s", len(orders), week_start.date())
    return jsonify({"supplier_orders": [o.to_dict() for o in orders]}), 201
