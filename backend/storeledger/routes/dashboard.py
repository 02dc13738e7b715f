# Overview: Flask API routes for dashboard metrics; parses filters and returns JSON responses.

"""
Dashboard routes.

Each endpoint has its own default filter:
- /kpi          today
- /dues         last-week
- /sales        last-7-days (trend vocabulary)
- /outstanding  no filter (all time, plus ISO week buckets)

Unknown filter tokens are not errors; they fall back as date_windows defines.
"""

from flask import Blueprint, request, jsonify, current_app, g

from .. import date_windows
from ..decorators import require_auth
from ..services import metrics_service
from ..time_utils import to_utc_z, utcnow
from . import internal_error_response


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/kpi")
@require_auth
def kpi_route():
    token = request.args.get("filter") or date_windows.TOKEN_TODAY
    try:
        now = utcnow()
        window = date_windows.resolve(token, now)
        return jsonify({
            "filter": token,
            "start": to_utc_z(window.start),
            "end": to_utc_z(window.end),
            "kpis": metrics_service.kpis(g.store_id, token, now),
        }), 200
    except Exception:
        current_app.logger.exception("Failed to compute KPIs")
        return internal_error_response()


@dashboard_bp.get("/dues")
@require_auth
def dues_route():
    token = request.args.get("filter") or date_windows.TOKEN_LAST_WEEK
    try:
        window = date_windows.resolve(token, utcnow())
        return jsonify(metrics_service.cash_flow_breakdown(g.store_id, window)), 200
    except Exception:
        current_app.logger.exception("Failed to compute dues breakdown")
        return internal_error_response()


@dashboard_bp.get("/outstanding")
@require_auth
def outstanding_route():
    try:
        return jsonify(metrics_service.outstanding(g.store_id, utcnow())), 200
    except Exception:
        current_app.logger.exception("Failed to compute outstanding dues")
        return internal_error_response()


@dashboard_bp.get("/sales")
@require_auth
def sales_route():
    token = request.args.get("filter") or date_windows.SERIES_LAST_7_DAYS
    try:
        return jsonify(metrics_service.sales_series(g.store_id, token, utcnow())), 200
    except Exception:
        current_app.logger.exception("Failed to compute sales series")
        return internal_error_response()
