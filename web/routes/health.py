"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from utils.performance import PerformanceMonitor


health_bp = Blueprint("health", __name__)
monitor = PerformanceMonitor()


@health_bp.route("/health")
def health_check():
    services = current_app.extensions["promotion"]
    monitor.record_db_pool(services.store.pool.size)

    data = {
        "status": "ok",
        "locations": len(services.catalog),
        "db_pool_size": services.store.pool.size,
        "host": monitor.gather_host_metrics(),
    }
    return jsonify(data)
