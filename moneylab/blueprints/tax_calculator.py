"""
Tax calculator blueprint.

Endpoints for estimating federal tax burden under the deduction strategies
and for building shareable links to a tax scenario.
"""

import json
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from moneylab.models.share_state import decode_state, encode_state
from moneylab.models.tax_burden import (
    DEFAULT_TAX_CALCULATOR_STATE,
    TaxCalculatorState,
)
from moneylab.services.calculator_service import CalculatorService

tax_calculator_bp = Blueprint(
    "tax_calculator", __name__, url_prefix="/api/tax-calculator"
)


def _validation_error(e: ValidationError) -> Any:
    return (
        jsonify(
            {
                "error": "Invalid tax calculator state",
                "details": json.loads(e.json(include_url=False)),
            }
        ),
        400,
    )


def _parse_body() -> TaxCalculatorState:
    return TaxCalculatorState.model_validate(request.get_json(silent=True) or {})


@tax_calculator_bp.route("/burden", methods=["POST"])
def create_tax_burden() -> Any:
    """Estimate tax burden for the state in the request body.

    Returns:
        JSON response with baseline, adjusted and per-strategy figures
    """
    try:
        state = _parse_body()
        return jsonify(CalculatorService().run_tax_burden(state)), 200
    except ValidationError as e:
        return _validation_error(e)
    except Exception as e:
        current_app.logger.error(f"Error calculating tax burden: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@tax_calculator_bp.route("/burden", methods=["GET"])
def get_tax_burden() -> Any:
    """Estimate tax burden for a shared ``state`` link, or the defaults."""
    encoded = request.args.get("state")
    state = DEFAULT_TAX_CALCULATOR_STATE
    if encoded:
        state = decode_state(encoded, TaxCalculatorState)
        if state is None:
            return jsonify({"error": "Invalid state parameter"}), 400

    try:
        return jsonify(CalculatorService().run_tax_burden(state)), 200
    except Exception as e:
        current_app.logger.error(f"Error calculating tax burden: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@tax_calculator_bp.route("/defaults", methods=["GET"])
def get_defaults() -> Any:
    """Default tax calculator state and its share link."""
    return jsonify(
        {
            "state": DEFAULT_TAX_CALCULATOR_STATE.to_json_dict(),
            "link": encode_state(DEFAULT_TAX_CALCULATOR_STATE),
        }
    )


@tax_calculator_bp.route("/share", methods=["POST"])
def share_tax_state() -> Any:
    """Encode the state in the request body as a share link parameter."""
    try:
        state = _parse_body()
    except ValidationError as e:
        return _validation_error(e)

    return jsonify({"state": encode_state(state)}), 200
