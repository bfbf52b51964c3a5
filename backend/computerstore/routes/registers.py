# Overview: Flask API routes for cash register limit reconciliation.

from flask import Blueprint, current_app, jsonify, request

from ..errors import StoreError
from ..services import cash_limit_service
from ..time_utils import utcnow
from . import error_response, require_datetime


registers_bp = Blueprint("registers", __name__, url_prefix="/api/registers")


@registers_bp.post("/<int:register_id>/cash-limit-check")
def cash_limit_check_route(register_id: int):
    """
    Reconcile a register's day against its cash limit.

    Request body (optional):
    {
        "date": "YYYY-MM-DD" (defaults to today, UTC)
    }

    Returns:
        200: {"violation": {...} | null, "recorded": bool}
        404: Register not found
    """
    data = request.get_json(silent=True) or {}
    try:
        on_date = require_datetime(data["date"], "date") if data.get("date") else utcnow()
        violation = cash_limit_service.check_and_record_cash_limit_violation(register_id, on_date)
    except StoreError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to check cash limit")
        return jsonify({"error": "Internal server error"}), 500

    if violation is not None:
        current_app.logger.warning(
            "Cash limit violation recorded for register %s: limit %s, actual %s",
            register_id, violation.limit_amount, violation.actual_amount,
        )
    return jsonify({
        "violation": violation.to_dict() if violation else None,
        "recorded": violation is not None,
    }), 200


@registers_bp.get("/<int:register_id>/violations")
def list_violations_route(register_id: int):
    violations = cash_limit_service.list_violations(register_id)
    return jsonify({"violations": [v.to_dict() for v in violations]}), 200
