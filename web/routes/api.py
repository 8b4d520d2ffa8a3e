"""Public API used by the location pages."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from core.constants import PromotionDefaults
from core.exceptions import UnknownLocationError
from services.async_runner import run_coroutine_sync
from services.promotion import PromotionServices
from utils.performance import PerformanceMonitor
from utils.validators import parse_participation

api_bp = Blueprint("api", __name__, url_prefix="/api")
monitor = PerformanceMonitor()


def _services() -> PromotionServices:
    return current_app.extensions["promotion"]


@api_bp.route("/locations")
def list_locations():
    return jsonify(_services().catalog.to_dict())


@api_bp.route("/locations/<location_id>")
def location_detail(location_id: str):
    status = run_coroutine_sync(_services().reporting.location_status(location_id))
    return jsonify(status)


@api_bp.route("/participate", methods=["POST"])
def participate():
    participation = parse_participation(request.get_json(silent=True))
    services = _services()

    try:
        with monitor.track_adjudication():
            result = run_coroutine_sync(
                services.adjudicator.adjudicate(
                    participation.location_id,
                    access_time=participation.access_time,
                    ip=request.remote_addr or PromotionDefaults.FALLBACK_ADDRESS,
                    user_agent=participation.user_agent or request.headers.get("User-Agent"),
                )
            )
    except UnknownLocationError as error:
        return jsonify({"error": "Location does not exist.", "code": error.code}), 400

    return jsonify(result.to_dict())
