"""Admin views: winners, visit log, statistics and event reset."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from services.async_runner import run_coroutine_sync
from services.reporting import ReportingService


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def _reporting() -> ReportingService:
    return current_app.extensions["promotion"].reporting


@admin_bp.route("/winners")
def winners():
    return jsonify(run_coroutine_sync(_reporting().winners()))


@admin_bp.route("/logs")
def logs():
    limit = request.args.get("limit", type=int)
    return jsonify(run_coroutine_sync(_reporting().logs(limit)))


@admin_bp.route("/stats")
def stats():
    return jsonify(run_coroutine_sync(_reporting().stats()))


@admin_bp.route("/reset", methods=["POST"])
def reset():
    run_coroutine_sync(_reporting().reset())
    current_app.logger.warning(f"Event reset requested from {request.remote_addr}")
    return jsonify({"message": "Event has been reset."})
