"""
Humidifying and dehumidifying process solvers.

Humidifying adds water at a known rate; the humidity ratio rises by

    ΔW = capacity [kg/h] / m [kg/h]

and the water brings its own enthalpy with it:
  - steam:       Δh = (L0 + cp_vapor × T_steam) × ΔW   (T_steam default 100 °C)
  - water spray: Δh = 4.186 × T_water × ΔW             (T_water default 15 °C)

Dehumidifying models a desiccant wheel: moisture is removed at a known rate
along a line of constant enthalpy, so the air leaves warmer and drier.
"""

from typing import Optional

from psychrochain.config import DEFAULT_SPRAY_WATER_TEMP, DEFAULT_STEAM_TEMP, WATER_CP
from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.errors import InvalidProcessParameters, UpstreamUnresolved
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import HumidifierType, ProcessOutcome, ProcessResults
from psychrochain.models.state_point import StatePoint


def _added_enthalpy(
    humidifier_type: HumidifierType,
    delta_W: float,
    constants: PsychrometricConstants,
    steam_temp: Optional[float],
    water_temp: Optional[float],
) -> float:
    if humidifier_type == HumidifierType.STEAM:
        Ts = DEFAULT_STEAM_TEMP if steam_temp is None else steam_temp
        return (constants.latent_heat_0c + constants.cp_vapor * Ts) * delta_W
    Tw = DEFAULT_SPRAY_WATER_TEMP if water_temp is None else water_temp
    return WATER_CP * Tw * delta_W


class HumidifyingSolver(ProcessSolver):
    """Solver for steam and water-spray humidifiers."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        params = ctx.process.parameters
        start = utils.from_point(ctx)
        airflow = utils.require_param(ctx, "airflow")
        m = utils.mass_flow(start, airflow)
        capacity = utils.check_non_negative(
            "humidifying_capacity", utils.require_param(ctx, "humidifying_capacity")
        )
        humidifier_type = params.humidifier_type or HumidifierType.STEAM

        delta_W = capacity / m
        end_W = start.humidity + delta_W
        end_h = start.enthalpy + _added_enthalpy(
            humidifier_type, delta_W, ctx.constants, params.steam_temp, params.water_temp
        )
        end_Tdb = props.dry_bulb_from_enthalpy(end_h, end_W, ctx.constants)
        end = utils.to_point(ctx, end_Tdb, end_W)

        results = ProcessResults(mass_flow=m, airflow=airflow, **utils.state_diffs(start, end))
        if humidifier_type == HumidifierType.STEAM:
            total, sensible, latent = utils.split_capacity(m, start, end, ctx.constants)
            results.total_heat = total
            results.sensible_heat = sensible
            results.latent_heat = latent

        warnings: list[str] = []
        if end.relative_humidity is not None and end.relative_humidity > 95.0:
            warnings.append(
                f"Air leaving '{ctx.process.id}' is at {end.relative_humidity:.1f}% RH; "
                f"the humidifier may not absorb all of its water."
            )
        return ProcessOutcome(to_point=end, results=results, warnings=warnings)


class DehumidifyingSolver(ProcessSolver):
    """Solver for desiccant dehumidification (constant enthalpy)."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        start = utils.from_point(ctx)
        airflow = utils.require_param(ctx, "airflow")
        m = utils.mass_flow(start, airflow)
        capacity = utils.check_non_negative(
            "humidifying_capacity", utils.require_param(ctx, "humidifying_capacity")
        )

        end_W = start.humidity - capacity / m
        if end_W < 0:
            raise InvalidProcessParameters(
                f"humidifying_capacity {capacity} kg/h removes more moisture than "
                f"the air at '{start.id}' holds",
                field="humidifying_capacity",
            )
        end_Tdb = props.dry_bulb_from_enthalpy(start.enthalpy, end_W, ctx.constants)
        end = utils.to_point(ctx, end_Tdb, end_W)

        results = ProcessResults(
            latent_heat=m * ctx.constants.latent_heat_0c * (start.humidity - end_W) / utils.SECONDS_PER_HOUR,
            mass_flow=m,
            airflow=airflow,
            **utils.state_diffs(start, end),
        )
        return ProcessOutcome(to_point=end, results=results)


def required_humidifying_capacity(
    start: StatePoint, target_humidity: float, airflow: float
) -> float:
    """
    Water rate [kg/h] that lifts a resolved point to target_humidity [kg/kg'].

    Zero when the point is already at or above the target.
    """
    if not start.is_resolved:
        raise UpstreamUnresolved(f"point '{start.id}' must be resolved", point_id=start.id)
    m = utils.mass_flow(start, airflow)
    return max(0.0, m * (target_humidity - start.humidity))
