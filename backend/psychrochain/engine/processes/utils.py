"""
Shared utility functions for process solvers.

Upstream lookup, parameter validation, mass flow and capacity bookkeeping
used by more than one solver are kept here.
"""

import math
from typing import Optional

from psychrochain.config import DEFAULT_WATER_TEMP_DIFF, WATER_CP
from psychrochain.engine import properties as props
from psychrochain.engine.processes.base import ProcessContext
from psychrochain.engine.state_resolver import resolve_input
from psychrochain.errors import InvalidProcessParameters, UpstreamUnresolved
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.state_point import DryBulbHumidity, StatePoint

SECONDS_PER_HOUR = 3600.0

IDENTITY_FIELDS = ("id", "name", "season", "order")


# ---------------------------------------------------------------------------
# Upstream points
# ---------------------------------------------------------------------------

def upstream_point(ctx: ProcessContext, point_id: str) -> StatePoint:
    """Fetch an upstream point, which must exist and be fully resolved."""
    point = ctx.points.get(point_id)
    if point is None:
        raise UpstreamUnresolved(
            f"Process '{ctx.process.id}' references unknown point '{point_id}'",
            point_id=point_id,
        )
    if not point.is_resolved:
        raise UpstreamUnresolved(
            f"Process '{ctx.process.id}' needs point '{point_id}' to be resolved first",
            point_id=point_id,
        )
    return point


def from_point(ctx: ProcessContext) -> StatePoint:
    return upstream_point(ctx, ctx.process.from_point_id)


# ---------------------------------------------------------------------------
# Parameter checks
# ---------------------------------------------------------------------------

def require_param(ctx: ProcessContext, field: str):
    """Return a parameter value or fail naming the missing field."""
    value = getattr(ctx.process.parameters, field)
    if value is None:
        raise InvalidProcessParameters(
            f"{field} is required for {ctx.process.type.value} process '{ctx.process.id}'",
            field=field,
        )
    return value


def check_positive(field: str, value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise InvalidProcessParameters(f"{field} must be positive, got {value}", field=field)
    return value


def check_non_negative(field: str, value: float) -> float:
    if not math.isfinite(value) or value < 0:
        raise InvalidProcessParameters(f"{field} must not be negative, got {value}", field=field)
    return value


def check_range(field: str, value: float, low: float, high: float) -> float:
    if not math.isfinite(value) or not low <= value <= high:
        raise InvalidProcessParameters(
            f"{field} must be between {low} and {high}, got {value}", field=field
        )
    return value


def exactly_one(ctx: ProcessContext, *fields: str) -> str:
    """Name the single parameter of a mutually exclusive group that was given."""
    given = [f for f in fields if getattr(ctx.process.parameters, f) is not None]
    if len(given) != 1:
        raise InvalidProcessParameters(
            f"{ctx.process.type.value} process '{ctx.process.id}' needs exactly one of "
            f"{', '.join(fields)}; got {', '.join(given) or 'none'}",
            field=fields[0],
        )
    return given[0]


# ---------------------------------------------------------------------------
# Flow and capacity
# ---------------------------------------------------------------------------

def mass_flow(point: StatePoint, airflow: float) -> float:
    """Dry-air mass flow [kg/h] of an airflow [m³/h] measured at a resolved point."""
    check_positive("airflow", airflow)
    return airflow / point.specific_volume


def split_capacity(
    mass_flow_kg_h: float,
    inlet: StatePoint,
    outlet: StatePoint,
    constants: PsychrometricConstants,
) -> tuple[float, float, float]:
    """
    Split the enthalpy change of a stream into (total, sensible, latent) kW.

    Sensible uses the moist-air cp at the mean humidity ratio; latent is the
    remainder. Signs follow outlet - inlet.
    """
    total = mass_flow_kg_h * (outlet.enthalpy - inlet.enthalpy) / SECONDS_PER_HOUR
    cp_mean = props.moist_air_specific_heat((inlet.humidity + outlet.humidity) / 2, constants)
    sensible = mass_flow_kg_h * cp_mean * (outlet.dry_bulb_temp - inlet.dry_bulb_temp) / SECONDS_PER_HOUR
    return total, sensible, total - sensible


def water_flow_rate(capacity: float, water_temp_diff: Optional[float] = None) -> float:
    """Coil water flow [L/min] carrying a capacity [kW] at a water-side ΔT [°C]."""
    if water_temp_diff is None:
        water_temp_diff = DEFAULT_WATER_TEMP_DIFF
    check_positive("water_temp_diff", water_temp_diff)
    return abs(capacity) * 60.0 / (WATER_CP * water_temp_diff)


def capacity_from_water_flow(flow_rate: float, water_temp_diff: Optional[float] = None) -> float:
    """Inverse of water_flow_rate: kW carried by a water flow [L/min]."""
    if water_temp_diff is None:
        water_temp_diff = DEFAULT_WATER_TEMP_DIFF
    check_positive("water_temp_diff", water_temp_diff)
    check_positive("water_flow_rate", flow_rate)
    return flow_rate * WATER_CP * water_temp_diff / 60.0


def state_diffs(inlet: StatePoint, outlet: StatePoint) -> dict[str, float]:
    return {
        "temperature_diff": outlet.dry_bulb_temp - inlet.dry_bulb_temp,
        "humidity_diff": outlet.humidity - inlet.humidity,
        "enthalpy_diff": outlet.enthalpy - inlet.enthalpy,
    }


# ---------------------------------------------------------------------------
# Downstream points
# ---------------------------------------------------------------------------

def build_point(
    template: StatePoint,
    dry_bulb_temp: float,
    humidity: float,
    constants: PsychrometricConstants,
    pressure: float,
) -> StatePoint:
    """
    Resolve a produced state, keeping only the identity of the template.

    Any property values the template carried from an earlier run are dropped.
    """
    identity = {f: getattr(template, f) for f in IDENTITY_FIELDS}
    return resolve_input(
        DryBulbHumidity(dry_bulb_temp=dry_bulb_temp, humidity=humidity),
        constants,
        pressure,
        **identity,
    )


def to_point(ctx: ProcessContext, dry_bulb_temp: float, humidity: float) -> StatePoint:
    return build_point(ctx.to_template, dry_bulb_temp, humidity, ctx.constants, ctx.pressure)
