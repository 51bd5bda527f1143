"""
Die with Zero blueprint.

Endpoints for projecting net worth over a lifetime and for building
shareable links to a projection scenario.
"""

import json
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from moneylab.models.projection import DEFAULT_CALCULATOR_INPUTS, CalculatorInputs
from moneylab.models.share_state import decode_state, encode_state
from moneylab.services.calculator_service import CalculatorService

die_with_zero_bp = Blueprint(
    "die_with_zero", __name__, url_prefix="/api/die-with-zero"
)


def _validation_error(e: ValidationError) -> Any:
    return (
        jsonify(
            {
                "error": "Invalid calculator inputs",
                "details": json.loads(e.json(include_url=False)),
            }
        ),
        400,
    )


def _run_projection(inputs: CalculatorInputs) -> Any:
    granularity = request.args.get("granularity", "yearly")
    if granularity not in ("monthly", "yearly"):
        return jsonify({"error": "granularity must be 'monthly' or 'yearly'"}), 400

    service = CalculatorService()
    try:
        calendar = service.calendar_for(
            request.args.get("startYear", type=int),
            request.args.get("startMonth", type=int),
        )
    except ValidationError as e:
        return (
            jsonify(
                {
                    "error": "Invalid calendar",
                    "details": json.loads(e.json(include_url=False)),
                }
            ),
            400,
        )

    result = service.run_projection(inputs, granularity, calendar)
    return jsonify(result), 200


@die_with_zero_bp.route("/projection", methods=["POST"])
def create_projection() -> Any:
    """Project net worth for the inputs in the request body.

    Returns:
        JSON response with snapshots, summary and breakdown
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    try:
        inputs = CalculatorInputs.model_validate(data)
        return _run_projection(inputs)
    except ValidationError as e:
        return _validation_error(e)
    except Exception as e:
        current_app.logger.error(f"Error running projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@die_with_zero_bp.route("/projection", methods=["GET"])
def get_projection() -> Any:
    """Project net worth for a shared ``state`` link, or the defaults.

    Returns:
        JSON response with snapshots, summary and breakdown
    """
    encoded = request.args.get("state")
    inputs = DEFAULT_CALCULATOR_INPUTS
    if encoded:
        inputs = decode_state(encoded, CalculatorInputs)
        if inputs is None:
            return jsonify({"error": "Invalid state parameter"}), 400

    try:
        return _run_projection(inputs)
    except Exception as e:
        current_app.logger.error(f"Error running projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@die_with_zero_bp.route("/defaults", methods=["GET"])
def get_defaults() -> Any:
    """Default calculator inputs and their share link."""
    return jsonify(
        {
            "inputs": DEFAULT_CALCULATOR_INPUTS.to_json_dict(),
            "link": encode_state(DEFAULT_CALCULATOR_INPUTS),
        }
    )


@die_with_zero_bp.route("/share", methods=["POST"])
def share_projection() -> Any:
    """Encode the inputs in the request body as a share link parameter."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    try:
        inputs = CalculatorInputs.model_validate(data)
    except ValidationError as e:
        return _validation_error(e)

    return jsonify({"state": encode_state(inputs)}), 200
