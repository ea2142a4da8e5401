"""
Fan heat gain and air supply solvers.

Fan heating is sensible only. The part of the fan power not delivered as
useful air power ends up in the airstream:

    ΔT = P × (1 - η) × 3600 / (m × cp_eff)

Air supply is a pass-through that marks where conditioned air is delivered;
it only annotates the airflow and the dry-air mass flow.
"""

from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.models.process import ProcessOutcome, ProcessResults


class FanHeatingSolver(ProcessSolver):
    """Solver for the temperature rise across a supply fan."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        start = utils.from_point(ctx)
        airflow = utils.require_param(ctx, "airflow")
        m = utils.mass_flow(start, airflow)
        fan_power = utils.check_non_negative("fan_power", utils.require_param(ctx, "fan_power"))
        efficiency = utils.require_param(ctx, "fan_efficiency")
        utils.check_range("fan_efficiency", efficiency, 0.0, 100.0)

        heat = fan_power * (1.0 - efficiency / 100.0)
        cp_eff = props.moist_air_specific_heat(start.humidity, ctx.constants)
        end_Tdb = start.dry_bulb_temp + heat * utils.SECONDS_PER_HOUR / (m * cp_eff)
        end = utils.to_point(ctx, end_Tdb, start.humidity)

        results = ProcessResults(
            sensible_heat=heat,
            temperature_diff=end.dry_bulb_temp - start.dry_bulb_temp,
            mass_flow=m,
            airflow=airflow,
        )
        return ProcessOutcome(to_point=end, results=results)


class AirSupplySolver(ProcessSolver):
    """Pass-through from the unit to the served space."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        start = utils.from_point(ctx)
        end = utils.to_point(ctx, start.dry_bulb_temp, start.humidity)

        airflow = ctx.process.parameters.airflow
        results = ProcessResults(
            airflow=airflow,
            mass_flow=utils.mass_flow(start, airflow) if airflow is not None else None,
        )
        return ProcessOutcome(to_point=end, results=results)
