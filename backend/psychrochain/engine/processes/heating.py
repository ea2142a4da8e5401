"""
Heating coil process solver.

Heating is a horizontal line on the psychrometric chart: the humidity ratio
stays constant while the dry-bulb rises. The coil duty is

    Q [kW] = m [kg/h] × cp_eff × ΔT / 3600,   cp_eff = cp_air + W × cp_vapor

Exactly one of three inputs sets the duty:
  - capacity: the coil capacity in kW
  - water_flow_rate: hot water flow in L/min at water_temp_diff (default 7 K)
  - target_temp: the leaving dry-bulb
"""

import logging

from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.errors import InvalidProcessParameters
from psychrochain.models.process import ProcessOutcome, ProcessResults

logger = logging.getLogger(__name__)


class HeatingSolver(ProcessSolver):
    """Solver for sensible heating coils."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        params = ctx.process.parameters
        start = utils.from_point(ctx)
        airflow = utils.require_param(ctx, "airflow")
        m = utils.mass_flow(start, airflow)
        cp_eff = props.moist_air_specific_heat(start.humidity, ctx.constants)

        mode = utils.exactly_one(ctx, "capacity", "water_flow_rate", "target_temp")
        if mode == "target_temp":
            end_Tdb = params.target_temp
            if end_Tdb < start.dry_bulb_temp:
                raise InvalidProcessParameters(
                    f"target_temp {end_Tdb}°C is below the entering "
                    f"{start.dry_bulb_temp:.2f}°C; use a cooling process",
                    field="target_temp",
                )
            capacity = m * cp_eff * (end_Tdb - start.dry_bulb_temp) / utils.SECONDS_PER_HOUR
        else:
            if mode == "capacity":
                capacity = utils.check_non_negative("capacity", params.capacity)
            else:
                capacity = utils.capacity_from_water_flow(
                    params.water_flow_rate, params.water_temp_diff
                )
            end_Tdb = start.dry_bulb_temp + capacity * utils.SECONDS_PER_HOUR / (m * cp_eff)

        end = utils.to_point(ctx, end_Tdb, start.humidity)
        logger.debug("heating %s: %.2f kW, %.2f -> %.2f°C", ctx.process.id, capacity, start.dry_bulb_temp, end_Tdb)

        results = ProcessResults(
            sensible_heat=capacity,
            latent_heat=0.0,
            total_heat=capacity,
            mass_flow=m,
            airflow=airflow,
            water_flow_rate=utils.water_flow_rate(capacity, params.water_temp_diff),
            **utils.state_diffs(start, end),
        )
        return ProcessOutcome(to_point=end, results=results)
