# Overview: Flask API routes for read-only reports.

# backend/computerstore/routes/reports.py
"""
Reporting API routes.

Date parameters are ISO-8601 query strings; month reports take ?month=&year=.
"""

from flask import Blueprint, jsonify, request

from ..errors import StoreError, ValidationError
from ..services import reporting_service
from ..services.reporting_service import ReportError
from ..time_utils import utcnow
from . import error_response, require_datetime, require_int


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _range_args():
    return (
        require_datetime(request.args.get("start"), "start"),
        require_datetime(request.args.get("end"), "end"),
    )


def _month_args():
    return (
        require_int(request.args.get("month"), "month"),
        require_int(request.args.get("year"), "year"),
    )


def _report(build):
    try:
        return jsonify({"report": build()}), 200
    except StoreError as e:
        return error_response(e)
    except ReportError as e:
        return jsonify({"error": str(e)}), 400


@reports_bp.get("/store-point-equipment/<int:store_point_id>")
def store_point_equipment_route(store_point_id: int):
    return _report(lambda: reporting_service.store_point_equipment(store_point_id))


@reports_bp.get("/central-warehouse")
def central_warehouse_route():
    def build():
        as_of = request.args.get("date")
        return reporting_service.central_warehouse_state(
            require_datetime(as_of, "date") if as_of else utcnow()
        )
    return _report(build)


@reports_bp.get("/total-warehouse")
def total_warehouse_route():
    return _report(reporting_service.total_warehouse)


@reports_bp.get("/sellers/<int:seller_id>/sales")
def seller_sales_route(seller_id: int):
    return _report(lambda: reporting_service.seller_sales(seller_id))


@reports_bp.get("/sellers")
def sellers_route():
    return _report(lambda: reporting_service.sellers_sales_report(*_range_args()))


@reports_bp.get("/popular-products")
def popular_products_route():
    return _report(lambda: reporting_service.popular_products(*_range_args()))


@reports_bp.get("/revenue")
def revenue_route():
    return _report(lambda: reporting_service.revenue_report(*_range_args()))


@reports_bp.get("/unsold-products")
def unsold_products_route():
    return _report(lambda: reporting_service.unsold_products(*_range_args()))


@reports_bp.get("/sellers/<int:seller_id>/orders")
def seller_orders_route(seller_id: int):
    return _report(lambda: reporting_service.seller_orders(seller_id))


@reports_bp.get("/weekly-supplier-orders")
def weekly_supplier_orders_route():
    def build():
        week_start = request.args.get("week_start")
        if not week_start:
            raise ValidationError("week_start is required")
        return reporting_service.weekly_supplier_orders(require_datetime(week_start, "week_start"))
    return _report(build)


@reports_bp.get("/sellers/<int:seller_id>/schedule")
def seller_schedule_route(seller_id: int):
    return _report(lambda: reporting_service.seller_schedule(seller_id, *_month_args()))


@reports_bp.get("/store-point-turnover")
def store_point_turnover_route():
    return _report(lambda: reporting_service.store_point_turnover(*_month_args()))


@reports_bp.get("/cash-limit-violations")
def cash_limit_violations_route():
    return _report(reporting_service.cash_limit_violations)


@reports_bp.get("/monthly")
def monthly_route():
    return _report(lambda: reporting_service.monthly_report(*_month_args()))
