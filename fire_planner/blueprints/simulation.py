"""
Simulation blueprint for FIRE projections.

This module provides API endpoints that accept a scenario as JSON, run the
deterministic projection or the Monte Carlo simulation, and return the results.
"""

from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from fire_planner.models.scenario import ScenarioParameters
from fire_planner.services.simulation_service import SimulationService, TrialLimitError

simulation_bp = Blueprint("simulation", __name__, url_prefix="/api")


def _validation_errors(error: ValidationError) -> List[Dict[str, Any]]:
    return [{"loc": list(err["loc"]), "msg": err["msg"]} for err in error.errors()]


def _load_scenario() -> Tuple[Optional[ScenarioParameters], Optional[Any]]:
    """Parse the request body into scenario parameters.

    Returns:
        (params, None) on success, or (None, error response) for a body that is
        missing, not JSON, not an object, or fails validation
    """
    try:
        data = request.get_json()
    except HTTPException:
        return None, (jsonify({"error": "Request body must be valid JSON"}), 400)
    if not isinstance(data, dict):
        return None, (jsonify({"error": "Scenario must be a JSON object"}), 400)

    try:
        return ScenarioParameters.model_validate(data), None
    except ValidationError as e:
        return None, (
            jsonify({"error": "Invalid scenario", "details": _validation_errors(e)}),
            400,
        )


def _get_service() -> SimulationService:
    return SimulationService(
        workers=current_app.config["MONTE_CARLO_WORKERS"],
        max_trials=current_app.config["MONTE_CARLO_MAX_TRIALS"],
        default_seed=current_app.config["MONTE_CARLO_DEFAULT_SEED"],
    )


@simulation_bp.route("/scenario/defaults", methods=["GET"])
def scenario_defaults() -> Any:
    """Return the default scenario.

    Returns:
        JSON response with every scenario field and its default
    """
    return jsonify(ScenarioParameters().model_dump(mode="json"))


@simulation_bp.route("/projection", methods=["POST"])
def run_projection() -> Any:
    """Run the deterministic projection for a scenario.

    Returns:
        JSON response with the year records, achievement year and warning
    """
    params, error = _load_scenario()
    if error is not None:
        return error

    try:
        result = _get_service().run_projection(params)
        return jsonify(result.model_dump(mode="json"))
    except Exception as e:
        current_app.logger.error(f"Error running projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@simulation_bp.route("/monte-carlo", methods=["POST"])
def run_monte_carlo() -> Any:
    """Run the projection and Monte Carlo simulation for a scenario.

    Query parameters:
        include_trials: When "true", include every trial's result

    Returns:
        JSON response with the achievement year and Monte Carlo summary
    """
    params, error = _load_scenario()
    if error is not None:
        return error

    include_trials = request.args.get("include_trials", "false").lower() == "true"

    try:
        results = _get_service().run_monte_carlo(params)
    except TrialLimitError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error running Monte Carlo simulation: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500

    monte_carlo = results["monte_carlo"]
    response: Dict[str, Any] = {
        "achievement_year": results["projection"].achievement_year,
        "overfunding_warning": results["projection"].overfunding_warning,
        "summary": monte_carlo.summary.model_dump(mode="json"),
    }
    if include_trials:
        response["trials"] = [t.model_dump(mode="json") for t in monte_carlo.trials]
    return jsonify(response)
