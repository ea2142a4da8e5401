"""
Runs an ordered sequence of processes over a set of state points.

Points that carry their own inputs are resolved first; points that some
active process produces are reset to their identity. Processes then run in
ascending order; each writes its produced point back into the working set so
later processes can use it. A process that fails is recorded and skipped,
and its downstream point is left unresolved, so processes depending on it
fail with UpstreamUnresolved in turn.
"""

import logging
from typing import Optional, Union

from psychrochain.config import INPUT_FIELDS, Season
from psychrochain.engine.process_engine import apply_process, index_points
from psychrochain.engine.processes.utils import IDENTITY_FIELDS
from psychrochain.engine.state_resolver import resolve_state_point
from psychrochain.errors import PsychroError
from psychrochain.models.chain import ChainResult
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import Process
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)


def runs_in_season(process: Process, season: Optional[Season]) -> bool:
    return season is None or process.season in (season, Season.BOTH)


def _identity_only(point: StatePoint) -> StatePoint:
    return StatePoint(**{f: getattr(point, f) for f in IDENTITY_FIELDS})


def run_process_chain(
    points: Union[dict[str, StatePoint], list[StatePoint]],
    processes: list[Process],
    constants: PsychrometricConstants,
    pressure: float,
    season: Optional[Season] = None,
) -> ChainResult:
    """
    Resolve the input points and apply every process of the season in order.

    Args:
        points: State points by id, or a list of them.
        processes: Processes in any order; they run sorted by `order`.
        constants: Physical constants and solver settings.
        pressure: Ambient pressure in kPa.
        season: Run only processes of this season (and those marked both).

    Returns:
        ChainResult with completed copies of the points and processes.
    """
    working = index_points(points)
    warnings: list[str] = []
    failures: dict[str, str] = {}

    active = sorted(
        (p for p in processes if runs_in_season(p, season)), key=lambda p: p.order
    )
    produced = {p.to_point_id for p in active}
    produced.update(
        p.parameters.exhaust_outlet_point_id
        for p in active
        if p.parameters.exhaust_outlet_point_id is not None
    )

    for point_id, point in list(working.items()):
        if point_id in produced:
            # Values left from an earlier run must not feed this one
            working[point_id] = _identity_only(point)
            continue
        if all(getattr(point, f) is None for f in INPUT_FIELDS):
            continue
        try:
            resolution = resolve_state_point(point, constants, pressure)
        except PsychroError as e:
            warnings.append(f"{point_id}: {e.message}")
            working[point_id] = _identity_only(point)
            continue
        working[point_id] = resolution.point
        warnings.extend(resolution.warnings)

    results_by_id = {}
    for process in active:
        try:
            outcome = apply_process(process, working, constants, pressure)
        except PsychroError as e:
            logger.warning("process %s skipped: %s", process.id, e.message)
            failures[process.id] = f"{e.kind}: {e.message}"
            if process.to_point_id not in working:
                working[process.to_point_id] = StatePoint(
                    id=process.to_point_id, season=process.season
                )
            continue

        working[outcome.to_point.id] = outcome.to_point
        if outcome.exhaust_outlet is not None:
            working[outcome.exhaust_outlet.id] = outcome.exhaust_outlet
        warnings.extend(f"{process.id}: {w}" for w in outcome.warnings)
        results_by_id[process.id] = outcome.results

    updated = [
        p.model_copy(update={"results": results_by_id[p.id]}) if p.id in results_by_id else p
        for p in processes
    ]
    return ChainResult(
        points=list(working.values()),
        processes=updated,
        warnings=warnings,
        failures=failures,
    )
