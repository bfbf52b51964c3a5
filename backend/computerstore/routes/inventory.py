# Overview: Flask API routes for equipment intake and transfers.

from flask import Blueprint, current_app, jsonify, request

from ..errors import StoreError, ValidationError
from ..services import inventory_service
from . import error_response, require_datetime, require_int


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/equipment")


@inventory_bp.post("")
def receive_equipment_route():
    """
    Record a unit delivered by a supplier.

    Request body:
    {
        "supplier_id": int,
        "name": str,
        "purchase_price": "80000.00",
        "supplier_markup": "0.15",
        "invoice_number": str (optional),
        "warranty_months": int (optional),
        "store_point_id": int (optional, default central warehouse),
        "receipt_date": ISO-8601 (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        for field in ("supplier_id", "name", "purchase_price", "supplier_markup"):
            if field not in data:
                raise ValidationError(f"Missing required field: {field}")

        store_point_id = data.get("store_point_id")
        equipment = inventory_service.receive_equipment(
            supplier_id=require_int(data["supplier_id"], "supplier_id"),
            name=data["name"],
            purchase_price=data["purchase_price"],
            supplier_markup=data["supplier_markup"],
            invoice_number=data.get("invoice_number", ""),
            warranty_months=require_int(data.get("warranty_months", 0), "warranty_months"),
            store_point_id=require_int(store_point_id, "store_point_id") if store_point_id is not None else None,
            receipt_date=require_datetime(data["receipt_date"], "receipt_date") if data.get("receipt_date") else None,
        )
        return jsonify({"equipment": equipment.to_dict()}), 201

    except StoreError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to receive equipment")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.get("/<int:equipment_id>")
def get_equipment_route(equipment_id: int):
    try:
        equipment = inventory_service.get_equipment(equipment_id)
    except StoreError as e:
        return error_response(e)
    return jsonify({"equipment": equipment.to_dict()}), 200


@inventory_bp.post("/<int:equipment_id>/transfer")
def transfer_equipment_route(equipment_id: int):
    """
    Move a unit to a store point floor.

    Request body:
    {
        "store_point_id": int
    }

    Returns:
        200: {"transferred": true}
        400: Missing store_point_id
        409: {"transferred": false} (unit missing or sold, store point missing)
    """
    data = request.get_json(silent=True) or {}
    try:
        if "store_point_id" not in data:
            raise ValidationError("Missing required field: store_point_id")
        store_point_id = require_int(data["store_point_id"], "store_point_id")
    except StoreError as e:
        return error_response(e)

    transferred = inventory_service.transfer_equipment_to_store_point(equipment_id, store_point_id)
    if not transferred:
        current_app.logger.info(
            "Transfer of equipment %s to store point %s refused", equipment_id, store_point_id,
        )
        return jsonify({"transferred": False}), 409
    return jsonify({"transferred": True}), 200
