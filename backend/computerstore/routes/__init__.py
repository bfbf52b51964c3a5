# Overview: Shared helpers for Flask API routes.

from flask import current_app, jsonify

from ..errors import StoreError, ValidationError
from ..time_utils import parse_iso_datetime


def error_response(exc: StoreError):
    """Map a service error to its JSON body and HTTP status."""
    if exc.http_status >= 422:
        current_app.logger.warning("%s: %s %s", exc.kind, exc, exc.details)
    return jsonify(exc.to_dict()), exc.http_status


def require_datetime(value, field: str):
    try:
        parsed = parse_iso_datetime(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field} must be an ISO-8601 date or datetime", {field: value})
    return parsed


def require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise ValidationError(f"{field} must be an integer", {field: value})
    return value
