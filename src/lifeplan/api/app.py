# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Flask API for running life plan simulations."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Tuple

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from ..simulation import LifePlanSimulator, SimulationConfig, SimulationParameters
from ..simulation.historical_data import (
    HISTORICAL_DATA_LENGTH,
    HISTORICAL_YEARS,
    INFLATION_OPTIONS,
    MAX_SIMULATION_YEARS,
    STOCK_OPTIONS,
    get_historical_stats,
)

# Process environment wins over the optional repo root .env
_REPO_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _REPO_ROOT / ".env"
if _ENV_PATH.exists():
    load_dotenv(_ENV_PATH, override=False)

logger = logging.getLogger(__name__)

app = Flask(__name__)


def _to_int(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return default
    return default


def _build_config(payload: Dict[str, Any]) -> SimulationConfig:
    config = SimulationConfig.from_env()
    simulation_config = payload.get("simulation_config", {})
    if not isinstance(simulation_config, dict):
        return config
    seed = _to_int(simulation_config.get("seed"), None)
    if seed is not None:
        config = replace(config, random_seed=seed)
    return config


def _summary(outcome) -> Dict[str, Any]:
    results = outcome.results
    if results is None or not outcome.statistics:
        return {"num_trajectories": 0, "truncated_trajectories": 0}
    final = outcome.statistics[-1]
    return {
        "num_trajectories": results.num_trajectories,
        "truncated_trajectories": results.truncated_count,
        "final_age": final.age,
        "final_median": round(final.median, 2),
        "final_p10": round(final.p10, 2),
        "final_p90": round(final.p90, 2),
        "success_probability": round(results.success_rate(0), 4),
    }


def _simulate(payload: Dict[str, Any]) -> Dict[str, Any]:
    raw_params = payload.get("parameters", payload)
    if not isinstance(raw_params, dict):
        raise ValueError("parameters must be an object")
    params = SimulationParameters.from_dict(raw_params)
    outcome = LifePlanSimulator(_build_config(payload)).run(params)

    return {
        "success": True,
        "accepted": outcome.accepted,
        "message": outcome.message,
        "diagnostics": outcome.diagnostics,
        "simulation_method": params.simulation_method.value,
        "summary": _summary(outcome),
        "yearly_statistics": [s.to_dict() for s in outcome.statistics],
        "details": {"inputs": params.to_dict()},
    }


@app.get("/health")
def health() -> Tuple[Any, int]:
    return jsonify({"ok": True, "service": "lifeplan-simulation-api"}), 200


@app.get("/lifeplan/api/v1/reference-data")
def reference_data() -> Tuple[Any, int]:
    return jsonify({
        "success": True,
        "stock_options": [{"value": v, "label": label} for v, label in STOCK_OPTIONS],
        "inflation_options": [{"value": v, "label": label} for v, label in INFLATION_OPTIONS],
        "historical_years": HISTORICAL_YEARS,
        "data_length": HISTORICAL_DATA_LENGTH,
        "max_simulation_years": MAX_SIMULATION_YEARS,
        "stats": get_historical_stats(),
    }), 200


@app.post("/lifeplan/api/v1/simulate")
def simulate() -> Tuple[Any, int]:
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"success": False, "error": "Request JSON body is required"}), 400
    if not isinstance(payload, dict):
        return jsonify({"success": False, "error": "Request JSON body must be an object"}), 400
    try:
        return jsonify(_simulate(payload)), 200
    except ValueError as exc:
        logger.info("Rejected simulation request: %s", exc)
        return jsonify({"success": False, "error": str(exc)}), 400


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.getenv("PORT", "8001"))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"
    print(f"Starting lifeplan-simulation-api on port {port}")
    app.run(host="0.0.0.0", port=port, debug=debug)
