"""impactsim Flask application entrypoint."""
from __future__ import annotations

from typing import Any, Dict, Optional

import io
import random

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS

from impactsim.config import Settings, get_settings
from impactsim.backend import (
    AsteroidParameters,
    InvalidInputError,
    MitigationRequest,
    MitigationStrategy,
    RandomSource,
    ScenarioDataService,
    UnsupportedStrategyError,
    build_impact_briefing,
    build_strategy_config,
    calculate_impact,
    compare_outcomes,
    evaluate_mitigation,
)


def create_app(
    settings: Optional[Settings] = None,
    data_service: Optional[ScenarioDataService] = None,
) -> Flask:
    settings = settings or get_settings()
    physics = settings.physics_constants()
    data_service = data_service or ScenarioDataService(
        nasa_api_key=settings.nasa_api_key,
        enable_live_apis=settings.use_live_apis,
        default_event_id=settings.default_event_id,
    )

    app = Flask(__name__)
    app.config.update(DEBUG=settings.debug)
    app.json.sort_keys = False
    CORS(app)

    def _random_source() -> RandomSource:
        if settings.random_seed is None:
            return random.random
        return random.Random(settings.random_seed).random

    def _resolve_scenario(payload: Dict[str, Any]) -> Dict[str, Any]:
        """Explicit parameters win; otherwise resolve ``asteroid_id``."""

        if "diameter_m" in payload or "velocity_kms" in payload:
            parameters = AsteroidParameters(
                diameter=_number(payload, "diameter_m"),
                velocity=_number(payload, "velocity_kms"),
                angle=_number(payload, "angle_deg", settings.default_angle),
                impact_latitude=_number(payload, "impact_lat", settings.default_latitude),
                impact_longitude=_number(payload, "impact_lon", settings.default_longitude),
            )
            return {"source": "custom", "asteroid_id": None, "name": "Custom scenario", "parameters": parameters}

        source = data_service.get_scenario(
            _asteroid_id(payload),
            impact_lat=_optional_number(payload, "impact_lat"),
            impact_lon=_optional_number(payload, "impact_lon"),
            angle_deg=_optional_number(payload, "angle_deg"),
        )
        return {
            "source": source.source,
            "asteroid_id": source.asteroid_id,
            "name": source.name,
            "parameters": source.parameters,
        }

    def _mitigation_request(parameters: AsteroidParameters, raw: Dict[str, Any]) -> MitigationRequest:
        strategy = MitigationStrategy.parse(raw.get("strategy", MitigationStrategy.NONE))
        return MitigationRequest(
            parameters=parameters,
            strategy=strategy,
            warning_time_years=_number(raw, "warning_time_years", 0.0),
            config=build_strategy_config(strategy, raw.get("config")),
        )

    @app.errorhandler(InvalidInputError)
    @app.errorhandler(UnsupportedStrategyError)
    def handle_input_error(exc: ValueError) -> Any:
        return jsonify({"error": str(exc)}), 400

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> Any:
        payload = request.get_json(silent=True) or {}
        scenario = _resolve_scenario(payload)
        parameters: AsteroidParameters = scenario["parameters"]
        rng = _random_source()

        response: Dict[str, Any] = {
            "inputs": parameters.as_dict(),
            "source": {key: scenario[key] for key in ("source", "asteroid_id", "name")},
        }

        mitigation_payload = payload.get("mitigation")
        if mitigation_payload:
            comparison = compare_outcomes(_mitigation_request(parameters, mitigation_payload), rng=rng, physics=physics)
            response["impact"] = comparison.unmitigated.as_dict()
            response["comparison"] = comparison.as_dict()
        else:
            response["impact"] = calculate_impact(parameters, rng=rng, physics=physics).as_dict()
        return jsonify(response)

    @app.route("/api/mitigate", methods=["POST"])
    def mitigate() -> Any:
        payload = request.get_json(silent=True) or {}
        parameters = _resolve_scenario(payload)["parameters"]
        result = evaluate_mitigation(_mitigation_request(parameters, payload), physics=physics)
        return jsonify(result.as_dict())

    @app.route("/api/briefing", methods=["POST"])
    def briefing() -> Any:
        payload = request.get_json(silent=True) or {}
        scenario = _resolve_scenario(payload)
        parameters = scenario["parameters"]
        rng = _random_source()

        comparison = None
        mitigation_payload = payload.get("mitigation")
        if mitigation_payload:
            comparison = compare_outcomes(_mitigation_request(parameters, mitigation_payload), rng=rng, physics=physics)
            impact = comparison.unmitigated
        else:
            impact = calculate_impact(parameters, rng=rng, physics=physics)

        deck = build_impact_briefing(
            parameters,
            impact,
            comparison=comparison,
            scenario_name=scenario["name"],
            author=payload.get("author"),
        )
        return send_file(
            io.BytesIO(deck),
            mimetype="application/vnd.openxmlformats-officedocument.presentationml.presentation",
            as_attachment=True,
            download_name="impact-briefing.pptx",
        )

    @app.route("/api/asteroids", methods=["GET"])
    def asteroid_catalog() -> Any:
        limit = request.args.get("limit", 12, type=int)
        return jsonify({"objects": data_service.list_catalog(limit=limit)})

    @app.route("/api/historical", methods=["GET"])
    def historical_events() -> Any:
        limit = request.args.get("limit", 12, type=int)
        return jsonify({"events": data_service.list_historical_events(limit=limit)})

    @app.route("/api/health", methods=["GET"])
    def health() -> Any:
        return jsonify(data_service.get_health_snapshot())

    return app


def _number(payload: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = payload.get(key, default)
    if value is None:
        raise InvalidInputError(f"{key} is required")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{key} must be a number, got {value!r}") from exc


def _optional_number(payload: Dict[str, Any], key: str) -> Optional[float]:
    if payload.get(key) is None:
        return None
    return _number(payload, key)


def _asteroid_id(payload: Dict[str, Any]) -> Optional[str]:
    value = payload.get("asteroid_id")
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise InvalidInputError(f"asteroid_id must be a string, got {value!r}")


if __name__ == "__main__":
    settings = get_settings()
    create_app(settings).run(debug=settings.debug)
