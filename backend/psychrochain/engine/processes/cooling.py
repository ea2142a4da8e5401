"""
Cooling coil process solver.

Three ways to describe the coil, exactly one of which must be given:

  - capacity + shf: the total duty is split by the sensible heat factor,
        ΔT = Q × SHF × 3600 / (m × cp_eff)
        ΔW = Q × (1 - SHF) × 3600 / (m × L0)
  - capacity + outlet_rh: the air cools at constant W until it reaches the
    outlet RH, then follows that RH curve for the rest of the duty.
  - apparatus_dew_point + bypass_factor: the leaving state lies on the line
    from the entering state toward the saturated ADP,
        h_out = h_in - (1 - BF) × (h_in - h_adp),  same for W.

Heat results are positive magnitudes of the heat removed.
"""

import logging

from scipy.optimize import brentq

from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.errors import InvalidProcessParameters
from psychrochain.models.process import ProcessOutcome, ProcessResults
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)


def _leaving_by_shf(ctx: ProcessContext, start: StatePoint, m: float, capacity: float) -> tuple[float, float]:
    shf = ctx.process.parameters.shf
    if not 0 < shf <= 1:
        raise InvalidProcessParameters(f"shf must be in (0, 1], got {shf}", field="shf")

    cp_eff = props.moist_air_specific_heat(start.humidity, ctx.constants)
    delta_T = capacity * shf * utils.SECONDS_PER_HOUR / (m * cp_eff)
    delta_W = capacity * (1 - shf) * utils.SECONDS_PER_HOUR / (m * ctx.constants.latent_heat_0c)

    if delta_W > start.humidity:
        raise InvalidProcessParameters(
            f"latent duty {capacity * (1 - shf):.2f} kW removes more moisture than "
            f"the air at '{start.id}' holds",
            field="capacity",
        )
    return start.dry_bulb_temp - delta_T, start.humidity - delta_W


def _leaving_by_outlet_rh(
    ctx: ProcessContext, start: StatePoint, m: float, capacity: float
) -> tuple[float, float]:
    constants, pressure = ctx.constants, ctx.pressure
    outlet_rh = utils.check_range("outlet_rh", ctx.process.parameters.outlet_rh, 0.0, 100.0)
    if outlet_rh == 0:
        raise InvalidProcessParameters("outlet_rh must be above 0%", field="outlet_rh")

    delta_h = capacity * utils.SECONDS_PER_HOUR / m

    # Sensible leg: constant W down to the temperature where RH = outlet_rh
    knee_Tdb, knee_h = start.dry_bulb_temp, start.enthalpy
    if start.relative_humidity is not None and outlet_rh > start.relative_humidity:
        pv = props.vapor_pressure_from_humidity(start.humidity, pressure, constants)
        knee_Tdb = props.saturation_temperature(pv / (outlet_rh / 100.0), constants)
        knee_h = props.enthalpy(knee_Tdb, start.humidity, constants)

    if delta_h <= start.enthalpy - knee_h + 1e-6:
        end_Tdb = props.dry_bulb_from_enthalpy(start.enthalpy - delta_h, start.humidity, constants)
        return end_Tdb, start.humidity

    # Latent leg: along the outlet RH curve
    target_h = start.enthalpy - delta_h

    def objective(Tdb: float) -> float:
        W = props.absolute_humidity(Tdb, outlet_rh, pressure, constants)
        return props.enthalpy(Tdb, W, constants) - target_h

    low = constants.min_temperature
    if objective(low) > 0 or objective(knee_Tdb) < 0:
        raise InvalidProcessParameters(
            f"capacity {capacity} kW cannot be reached along {outlet_rh}% RH "
            f"from '{start.id}'",
            field="outlet_rh",
        )

    end_Tdb = brentq(objective, low, knee_Tdb, xtol=ctx.constants.convergence_tolerance)
    end_W = props.absolute_humidity(end_Tdb, outlet_rh, pressure, constants)
    if end_W > start.humidity + ctx.constants.humidity_tolerance:
        raise InvalidProcessParameters(
            f"outlet_rh {outlet_rh}% would add moisture to '{start.id}'",
            field="outlet_rh",
        )
    return end_Tdb, min(end_W, start.humidity)


def _leaving_by_adp(ctx: ProcessContext, start: StatePoint) -> tuple[float, float]:
    params = ctx.process.parameters
    constants = ctx.constants
    adp = params.apparatus_dew_point
    bf = utils.check_range("bypass_factor", utils.require_param(ctx, "bypass_factor"), 0.0, 1.0)
    if bf == 1.0:
        raise InvalidProcessParameters("bypass_factor must be below 1", field="bypass_factor")
    if adp >= start.dry_bulb_temp:
        raise InvalidProcessParameters(
            f"apparatus_dew_point {adp}°C must be below the entering dry-bulb "
            f"{start.dry_bulb_temp:.2f}°C",
            field="apparatus_dew_point",
        )

    W_adp = props.saturation_humidity(adp, ctx.pressure, constants)
    if W_adp > start.humidity:
        raise InvalidProcessParameters(
            f"apparatus_dew_point {adp}°C is above the entering dew point; "
            f"the coil would add moisture",
            field="apparatus_dew_point",
        )
    h_adp = props.enthalpy(adp, W_adp, constants)

    h_out = start.enthalpy - (1 - bf) * (start.enthalpy - h_adp)
    W_out = start.humidity - (1 - bf) * (start.humidity - W_adp)
    return props.dry_bulb_from_enthalpy(h_out, W_out, constants), W_out


class CoolingSolver(ProcessSolver):
    """Solver for cooling and dehumidifying coils."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        params = ctx.process.parameters
        start = utils.from_point(ctx)
        airflow = utils.require_param(ctx, "airflow")
        m = utils.mass_flow(start, airflow)
        warnings: list[str] = []

        mode = utils.exactly_one(ctx, "shf", "outlet_rh", "apparatus_dew_point")
        if mode == "apparatus_dew_point":
            end_Tdb, end_W = _leaving_by_adp(ctx, start)
        else:
            capacity = utils.check_non_negative("capacity", utils.require_param(ctx, "capacity"))
            if mode == "shf":
                end_Tdb, end_W = _leaving_by_shf(ctx, start, m, capacity)
            else:
                end_Tdb, end_W = _leaving_by_outlet_rh(ctx, start, m, capacity)

        end = utils.to_point(ctx, end_Tdb, end_W)

        if mode == "shf":
            total = capacity
            sensible = capacity * params.shf
        else:
            total = m * (start.enthalpy - end.enthalpy) / utils.SECONDS_PER_HOUR
            cp_eff = props.moist_air_specific_heat(start.humidity, ctx.constants)
            sensible = m * cp_eff * (start.dry_bulb_temp - end.dry_bulb_temp) / utils.SECONDS_PER_HOUR
        latent = total - sensible

        if end.relative_humidity is not None and end.relative_humidity >= 99.9:
            warnings.append(
                f"Leaving air of '{ctx.process.id}' is saturated "
                f"({end.dry_bulb_temp:.1f}°C); check the coil selection."
            )

        logger.debug(
            "cooling %s (%s): %.2f kW total, %.2f kW sensible", ctx.process.id, mode, total, sensible
        )
        results = ProcessResults(
            sensible_heat=sensible,
            latent_heat=latent,
            total_heat=total,
            mass_flow=m,
            airflow=airflow,
            water_flow_rate=utils.water_flow_rate(total, params.water_temp_diff),
            shf=sensible / total if total > 0 else None,
            **utils.state_diffs(start, end),
        )
        return ProcessOutcome(to_point=end, results=results, warnings=warnings)
