"""FastAPI server — HTTP access to the charge-point load simulator.

Run with:
    uvicorn evcp_simulator.api.server:app --reload --port 8000

Or:
    python -m evcp_simulator.api.server

Endpoints:
    GET  /context              — self-describing manifest
    GET  /schema               — full JSON Schema for Scenario inputs
    GET  /scenario/defaults    — complete default scenario as JSON
    POST /simulate             — run a full-year simulation (partial or full Scenario)
    POST /simulate/sweep       — concurrency factor per charger count
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from evcp_simulator.config.scenario import Scenario
from evcp_simulator.engine.orchestrator import run_engine, summarize
from evcp_simulator.engine.sweep import DEFAULT_CHARGER_COUNTS, run_charger_sweep
from evcp_simulator.api.context import build_context, get_scenario_schema, get_default_scenario
from evcp_simulator.api.narrative import generate_narrative

logger = logging.getLogger(__name__)

MAX_SWEEP_POINTS = 100


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="EV Charge Point Load Simulator API",
    version="1.0",
    description=(
        "Simulates one year of EV charge-point demand at 15-minute resolution "
        "and reports peak power, concurrency factor and energy consumption. "
        "Start by calling GET /context."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class SimulateRequest(BaseModel):
    """Request body for /simulate. All fields optional — defaults used for missing."""
    scenario: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full Scenario JSON. Missing fields use defaults. "
                    "Example: {'simulation': {'num_chargers': 10, 'random_seed': 7}}",
    )


class SweepRequest(BaseModel):
    """Request body for /simulate/sweep."""
    scenario: dict[str, Any] = Field(default_factory=dict)
    charger_counts: list[int] = Field(
        default_factory=lambda: list(DEFAULT_CHARGER_COUNTS),
        max_length=MAX_SWEEP_POINTS,
        description="Fleet sizes to simulate. Default: 1..30.",
    )


class SimulateResponse(BaseModel):
    """Response from /simulate."""
    result: dict[str, Any]
    summary: dict[str, Any]
    narrative: str = ""


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_scenario(overrides: dict[str, Any]) -> Scenario:
    """Build a Scenario from partial overrides merged onto defaults.

    Invalid overrides surface as a 422 like any other request validation error.
    """
    defaults = get_default_scenario()
    _deep_merge(defaults, overrides)
    try:
        return Scenario(**defaults)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def _deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointer to /context."""
    return {
        "name": "EV Charge Point Load Simulator API",
        "version": "1.0",
        "start_here": "GET /context?detail_level=full",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/context")
def get_context(
    detail_level: Literal["compact", "full"] = Query(
        default="full",
        description="'compact' for parameters only, 'full' adds the model description and formulas",
    ),
):
    """Self-describing context manifest."""
    return build_context(detail_level)


@app.get("/schema")
def get_schema():
    """Full JSON Schema for Scenario — all input parameters with types, defaults, constraints."""
    return get_scenario_schema()


@app.get("/scenario/defaults")
def get_defaults():
    """Complete default Scenario as JSON. Use as a starting point for modifications."""
    return get_default_scenario()


@app.post("/simulate", response_model=SimulateResponse)
def simulate(req: SimulateRequest):
    """Run a full-year simulation.

    Send a partial Scenario (only the fields you want to change).
    Missing fields use defaults.  ``monte_carlo_runs > 1`` returns the
    representative run with percentile statistics attached.

    Example minimal request:
    ```json
    {"scenario": {"simulation": {"num_chargers": 5, "random_seed": 42}}}
    ```
    """
    scenario = _build_scenario(req.scenario)
    logger.info(f"POST /simulate: {scenario.simulation.num_chargers} chargers")
    result = run_engine(scenario)
    return SimulateResponse(
        result=result.model_dump(),
        summary=summarize(result).model_dump(),
        narrative=generate_narrative(result),
    )


@app.post("/simulate/sweep")
def simulate_sweep(req: SweepRequest):
    """Simulate one year per charger count and return the concurrency curve."""
    scenario = _build_scenario(req.scenario)
    sweep = run_charger_sweep(scenario, req.charger_counts)
    return {
        "points": [p.model_dump() for p in sweep.points],
        "interpretation": (
            "concurrency_factor is the share of installed capacity drawn at the "
            "busiest moment of the year. It usually falls as the fleet grows."
        ),
    }


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "evcp_simulator.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
