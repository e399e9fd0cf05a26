"""Context manifest — makes the simulator self-describing for API clients.

Two detail levels:
  - ``compact``: parameter schemas + descriptions
  - ``full``:    adds the model description, formulas and endpoint list
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from evcp_simulator.config import Scenario, SimulationConfig


# ═══════════════════════════════════════════════════════════════════════════
# Public response models
# ═══════════════════════════════════════════════════════════════════════════

class ParameterInfo(BaseModel):
    """One configurable parameter, machine-readable."""
    name: str
    type: str
    default: Any
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class EndpointInfo(BaseModel):
    """Description of one API endpoint."""
    method: str
    path: str
    description: str


class SimulatorContext(BaseModel):
    """Self-describing context for API consumers."""
    simulator_name: str
    version: str
    description: str
    model_description: str
    key_formulas: list[dict[str, str]]
    parameters: list[ParameterInfo]
    endpoints: list[EndpointInfo]


# ═══════════════════════════════════════════════════════════════════════════
# Schema extraction from Pydantic models
# ═══════════════════════════════════════════════════════════════════════════

def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        constraints: dict[str, Any] = {}
        for attr in ("ge", "gt", "le", "lt"):
            meta_val = _get_field_metadata(field_info, attr)
            if meta_val is not None:
                constraints[attr] = meta_val

        type_str = str(field_info.annotation) if field_info.annotation else "Any"
        type_str = type_str.replace("typing.", "").replace("<class '", "").replace("'>", "")

        params.append(ParameterInfo(
            name=name,
            type=type_str,
            default=field_info.default,
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


def _get_field_metadata(field_info: Any, attr: str) -> Any:
    """Extract constraint metadata from Pydantic field info."""
    for m in getattr(field_info, "metadata", []):
        if hasattr(m, attr):
            return getattr(m, attr)
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Context builders
# ═══════════════════════════════════════════════════════════════════════════

_MODEL_DESCRIPTION = """
Simulates one year of a charge-point fleet at 15-minute resolution (35,040 ticks).

Every tick, vehicles arrive with an hour-of-day probability (table T1) scaled by
the arrival multiplier and by the number of free charge points.  Each arriving
vehicle draws a range deficit from table T2; 0 km means no charging is needed.
Otherwise the vehicle occupies the first free charge point at rated power until
its energy is delivered.  Fleet power is summed every tick to give energy, the
observed peak and the concurrency factor (peak / installed capacity).
""".strip()

_KEY_FORMULAS = [
    {"name": "expected arrivals", "formula": "P(hour) × arrival_multiplier × free_charge_points"},
    {"name": "energy needed", "formula": "km / 100 × consumption_kwh_per_100km"},
    {"name": "session ticks", "formula": "ceil(energy / charging_power_kw × 4), at least 1"},
    {"name": "energy", "formula": "Σ fleet_power × 0.25 h"},
    {"name": "concurrency factor", "formula": "actual_max_power / (num_chargers × charging_power_kw)"},
]

_ENDPOINTS = [
    EndpointInfo(method="GET", path="/context", description="This manifest"),
    EndpointInfo(method="GET", path="/schema", description="JSON Schema for Scenario"),
    EndpointInfo(method="GET", path="/scenario/defaults", description="Default Scenario"),
    EndpointInfo(method="POST", path="/simulate", description="Run a (partial) scenario"),
    EndpointInfo(method="POST", path="/simulate/sweep", description="Concurrency factor per fleet size"),
]


def build_context(detail_level: Literal["compact", "full"] = "full") -> SimulatorContext:
    """Build the manifest.  ``compact`` omits prose and formulas."""
    full = detail_level == "full"
    return SimulatorContext(
        simulator_name="EV Charge Point Load Simulator",
        version="1.0",
        description="Peak power, concurrency and energy of an EV charge-point fleet over one year.",
        model_description=_MODEL_DESCRIPTION if full else "",
        key_formulas=_KEY_FORMULAS if full else [],
        parameters=_extract_params(SimulationConfig),
        endpoints=_ENDPOINTS if full else [],
    )


def get_scenario_schema() -> dict:
    """Return the full JSON Schema for Scenario."""
    return Scenario.model_json_schema()


def get_default_scenario() -> dict:
    """Return default Scenario as a JSON-serializable dict."""
    return Scenario().model_dump(mode="json")
