"""
Process engine: applies one process to the current set of state points.

Dispatch is a closed table from ProcessType to a solver instance. Every
solver reads its upstream point(s), validates its parameters and produces
the downstream state; the engine only wires the inputs together.
"""

import logging
from typing import Optional, Union

from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.engine.processes.cooling import CoolingSolver
from psychrochain.engine.processes.fan import AirSupplySolver, FanHeatingSolver
from psychrochain.engine.processes.heat_exchange import HeatExchangeSolver
from psychrochain.engine.processes.heating import HeatingSolver
from psychrochain.engine.processes.humidification import DehumidifyingSolver, HumidifyingSolver
from psychrochain.engine.processes.mixing import MixingSolver
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import Process, ProcessOutcome, ProcessType
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)

# Solver dispatch table: maps process types to solver instances
SOLVERS: dict[ProcessType, ProcessSolver] = {
    ProcessType.HEATING: HeatingSolver(),
    ProcessType.COOLING: CoolingSolver(),
    ProcessType.HUMIDIFYING: HumidifyingSolver(),
    ProcessType.DEHUMIDIFYING: DehumidifyingSolver(),
    ProcessType.MIXING: MixingSolver(),
    ProcessType.HEAT_EXCHANGE: HeatExchangeSolver(),
    ProcessType.FAN_HEATING: FanHeatingSolver(),
    ProcessType.AIR_SUPPLY: AirSupplySolver(),
}


def index_points(points: Union[dict[str, StatePoint], list[StatePoint]]) -> dict[str, StatePoint]:
    if isinstance(points, dict):
        return dict(points)
    return {p.id: p for p in points}


def apply_process(
    process: Process,
    points: Union[dict[str, StatePoint], list[StatePoint]],
    constants: PsychrometricConstants,
    pressure: float,
    to_point: Optional[StatePoint] = None,
) -> ProcessOutcome:
    """
    Execute one process against the given points.

    Args:
        process: The process to apply.
        points: Current state points by id (a list is accepted too). Upstream
            points must already be resolved.
        constants: Physical constants and solver settings.
        pressure: Ambient pressure in kPa.
        to_point: Template for the produced point. Only its identity is
            kept; defaults to points[process.to_point_id] or a bare point.

    Returns:
        ProcessOutcome with the produced point, results and warnings.

    Raises:
        UpstreamUnresolved, InvalidProcessParameters, OutOfPhysicalRange,
        ConvergenceFailure
    """
    indexed = index_points(points)
    if to_point is None:
        to_point = indexed.get(process.to_point_id) or StatePoint(
            id=process.to_point_id, season=process.season
        )

    solver = SOLVERS[process.type]
    ctx = ProcessContext(
        process=process,
        points=indexed,
        constants=constants,
        pressure=pressure,
        to_template=to_point,
    )
    logger.debug("applying %s process %s: %s -> %s", process.type.value, process.id,
                 process.from_point_id, process.to_point_id)
    return solver.solve(ctx)
