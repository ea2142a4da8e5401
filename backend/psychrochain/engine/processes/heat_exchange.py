"""
Air-to-air heat exchanger (energy recovery) process solver.

The from-point is the outdoor air entering the supply side; the exhaust
point is the room air entering the exhaust side. Two efficiency models:

  - total (heat_exchange_efficiency): enthalpy and humidity ratio are both
    exchanged with one efficiency,
        h_sa = h_oa + ε × (h_ea - h_oa),   W_sa = W_oa + ε × (W_ea - W_oa)
  - separate (sensible_efficiency + latent_efficiency):
        T_sa = T_oa + ε_s × (T_ea - T_oa), W_sa = W_oa + ε_l × (W_ea - W_oa)

Unequal airflows de-rate the efficiencies by min(flow) / max(flow), where
each side's flow is the smaller of its inlet and outlet airflow.

Heat results are signed: positive when the supply air gains heat.
"""

import logging
from typing import Optional

from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.errors import InvalidProcessParameters, OutOfPhysicalRange
from psychrochain.models.process import ProcessOutcome, ProcessParameters, ProcessResults
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)


def effective_airflow(inlet: Optional[float], outlet: Optional[float]) -> float:
    """Airflow that actually passes the core: the smaller of inlet and outlet."""
    if inlet is None or inlet <= 0:
        return 0.0
    if outlet is None or outlet <= 0:
        return inlet
    return min(inlet, outlet)


def airflow_ratio(airflow1: float, airflow2: float) -> float:
    largest = max(airflow1, airflow2)
    if largest <= 0:
        return 0.0
    return min(airflow1, airflow2) / largest


def _side_airflows(params: ProcessParameters) -> tuple[float, float]:
    supply_in = params.supply_airflow_in
    if supply_in is None:
        supply_in = params.supply_airflow if params.supply_airflow is not None else params.airflow
    exhaust_in = params.exhaust_airflow_in
    if exhaust_in is None:
        exhaust_in = params.exhaust_airflow

    if supply_in is None:
        raise InvalidProcessParameters(
            "supply_airflow (or supply_airflow_in / airflow) is required for heat exchange",
            field="supply_airflow",
        )
    if exhaust_in is None:
        raise InvalidProcessParameters(
            "exhaust_airflow (or exhaust_airflow_in) is required for heat exchange",
            field="exhaust_airflow",
        )
    utils.check_positive("supply_airflow", supply_in)
    utils.check_positive("exhaust_airflow", exhaust_in)
    return (
        effective_airflow(supply_in, params.supply_airflow_out),
        effective_airflow(exhaust_in, params.exhaust_airflow_out),
    )


def _efficiencies(ctx: ProcessContext) -> tuple[bool, float, float]:
    """(total_mode, sensible %, latent %) from the parameter bag."""
    params = ctx.process.parameters
    total = params.heat_exchange_efficiency
    separate = (params.sensible_efficiency, params.latent_efficiency)

    if total is not None and any(e is not None for e in separate):
        raise InvalidProcessParameters(
            "give heat_exchange_efficiency or sensible_efficiency + latent_efficiency, not both",
            field="heat_exchange_efficiency",
        )
    if total is not None:
        utils.check_range("heat_exchange_efficiency", total, 0.0, 100.0)
        return True, total, total

    sensible = utils.require_param(ctx, "sensible_efficiency")
    latent = utils.require_param(ctx, "latent_efficiency")
    utils.check_range("sensible_efficiency", sensible, 0.0, 100.0)
    utils.check_range("latent_efficiency", latent, 0.0, 100.0)
    return False, sensible, latent


class HeatExchangeSolver(ProcessSolver):
    """Solver for total-heat and sensible/latent energy recovery wheels and plates."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        params = ctx.process.parameters
        outdoor = utils.from_point(ctx)
        exhaust = utils.upstream_point(ctx, utils.require_param(ctx, "exhaust_point_id"))
        constants = ctx.constants

        supply_flow, exhaust_flow = _side_airflows(params)
        ratio = airflow_ratio(supply_flow, exhaust_flow)
        total_mode, sensible_pct, latent_pct = _efficiencies(ctx)
        eff_s = sensible_pct / 100.0 * ratio
        eff_l = latent_pct / 100.0 * ratio

        warnings: list[str] = []
        if ratio < 1.0:
            warnings.append(
                f"Supply and exhaust airflows differ ({supply_flow:.0f} vs {exhaust_flow:.0f} m³/h); "
                f"efficiency de-rated by {ratio:.3f}."
            )

        W_sa = outdoor.humidity + eff_l * (exhaust.humidity - outdoor.humidity)
        W_eo = exhaust.humidity - eff_l * (exhaust.humidity - outdoor.humidity)
        if total_mode:
            h_sa = outdoor.enthalpy + eff_s * (exhaust.enthalpy - outdoor.enthalpy)
            h_eo = exhaust.enthalpy - eff_s * (exhaust.enthalpy - outdoor.enthalpy)
            T_sa = props.dry_bulb_from_enthalpy(h_sa, W_sa, constants)
            T_eo = props.dry_bulb_from_enthalpy(h_eo, W_eo, constants)
        else:
            T_sa = outdoor.dry_bulb_temp + eff_s * (exhaust.dry_bulb_temp - outdoor.dry_bulb_temp)
            T_eo = exhaust.dry_bulb_temp - eff_s * (exhaust.dry_bulb_temp - outdoor.dry_bulb_temp)

        supply = utils.to_point(ctx, T_sa, W_sa)
        exhaust_outlet = self._exhaust_outlet(ctx, exhaust, T_eo, W_eo, warnings)

        m = supply_flow / outdoor.specific_volume
        total, sensible, latent = utils.split_capacity(m, outdoor, supply, constants)

        logger.debug("heat exchange %s: ratio=%.3f, %.2f kW", ctx.process.id, ratio, total)
        results = ProcessResults(
            sensible_heat=sensible,
            latent_heat=latent,
            total_heat=total,
            mass_flow=m,
            airflow=supply_flow,
            **utils.state_diffs(outdoor, supply),
        )
        return ProcessOutcome(
            to_point=supply, results=results, warnings=warnings, exhaust_outlet=exhaust_outlet
        )

    @staticmethod
    def _exhaust_outlet(
        ctx: ProcessContext, exhaust: StatePoint, T_eo: float, W_eo: float, warnings: list[str]
    ) -> Optional[StatePoint]:
        params = ctx.process.parameters
        outlet_id = params.exhaust_outlet_point_id or f"{ctx.process.id}_exhaust_out"
        template = ctx.points.get(outlet_id) or StatePoint(
            id=outlet_id, name=f"{exhaust.name or exhaust.id} (exhaust out)", season=ctx.process.season
        )
        try:
            return utils.build_point(template, T_eo, W_eo, ctx.constants, ctx.pressure)
        except OutOfPhysicalRange as e:
            # The supply side is still valid when the exhaust side condenses.
            warnings.append(f"Exhaust outlet of '{ctx.process.id}' not resolved: {e.message}")
            return None


def required_heat_exchange_efficiency(
    outdoor: StatePoint, exhaust: StatePoint, target: StatePoint
) -> float:
    """
    Total efficiency [%] that brings outdoor air to the target enthalpy, clipped to 0-100.

    ε = (h_target - h_oa) / (h_ea - h_oa)
    """
    spread = exhaust.enthalpy - outdoor.enthalpy
    if abs(spread) < 1e-12:
        raise InvalidProcessParameters(
            "outdoor and exhaust air have the same enthalpy; no exchange is possible",
            field="heat_exchange_efficiency",
        )
    efficiency = (target.enthalpy - outdoor.enthalpy) / spread * 100.0
    return max(0.0, min(100.0, efficiency))
