"""Liveness endpoint."""

from flask import Blueprint, Response, jsonify

from moneylab.config import get_global_settings

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Report liveness along with the calculator configuration in effect."""
    settings = get_global_settings()
    return jsonify(
        {
            "status": "ok",
            "taxYear": settings.tax_year,
            "horizonPolicy": settings.projection_horizon_policy,
        }
    )
