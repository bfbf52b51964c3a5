# Overview: Flask API routes for sales; parses input and returns JSON responses.

# backend/computerstore/routes/sales.py
"""Sales API routes"""

from flask import Blueprint, current_app, jsonify, request

from ..errors import StoreError, ValidationError
from ..services import sales_service
from . import error_response, require_int


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def create_sale_route():
    """
    Create and commit a sale.

    Request body:
    {
        "seller_id": int,
        "store_point_id": int,
        "payment_type": "CASH" | "CASHLESS",
        "cash_register_id": int (required for CASH),
        "items": [{"equipment_id": int, "seller_markup": "0.10"}, ...]
    }

    Returns:
        201: Sale created, with items
        400: Malformed request
        404: Seller, store point, register or equipment not found
        409: Equipment already sold
        422: Business rule violated (markup, cash limit, cashless support)
    """
    data = request.get_json(silent=True) or {}
    try:
        for field in ("seller_id", "store_point_id", "payment_type", "items"):
            if field not in data:
                raise ValidationError(f"Missing required field: {field}")
        if not isinstance(data["items"], list):
            raise ValidationError("items must be a list")

        cash_register_id = data.get("cash_register_id")
        sale = sales_service.create_sale(
            seller_id=require_int(data["seller_id"], "seller_id"),
            store_point_id=require_int(data["store_point_id"], "store_point_id"),
            payment_type=data["payment_type"],
            items=data["items"],
            cash_register_id=require_int(cash_register_id, "cash_register_id") if cash_register_id is not None else None,
            retry_attempts=current_app.config.get("SALE_RETRY_ATTEMPTS", 3),
        )
        items = sales_service.get_sale_items(sale.id)
        current_app.logger.info(
            "Sale %s committed: %s items, total %s",
            sale.document_number, len(items), sale.to_dict()["total_with_sales_tax"],
        )
        return jsonify({
            "sale": sale.to_dict(),
            "items": [item.to_dict() for item in items],
        }), 201

    except StoreError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    """Get sale with items."""
    try:
        sale = sales_service.get_sale(sale_id)
    except StoreError as e:
        return error_response(e)

    return jsonify({
        "sale": sale.to_dict(),
        "items": [item.to_dict() for item in sales_service.get_sale_items(sale_id)],
    }), 200
