"""
Adiabatic mixing process solver.

Models the mixing of two airstreams in a mixing box with no external heat
transfer. The mixed state lies on a straight line between the two entering
states on the psychrometric chart, positioned by the dry-air mass flow ratio
(lever rule).

Conservation equations (dry-air mass basis):
    W_mix = f × W_1 + (1 - f) × W_2
    h_mix = f × h_1 + (1 - f) × h_2

where f = m_1 / (m_1 + m_2). With airflows given, m_i = airflow_i / v_i;
otherwise f comes straight from the stream ratios.
"""

import logging

from psychrochain.engine import properties as props
from psychrochain.engine.processes import utils
from psychrochain.engine.processes.base import ProcessContext, ProcessSolver
from psychrochain.errors import InvalidProcessParameters
from psychrochain.models.process import MixingRatios, ProcessOutcome, ProcessResults
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)


def _stream1_fraction(ratios: MixingRatios) -> float:
    r1, r2 = ratios.stream1.ratio, ratios.stream2.ratio
    if r1 is None and r2 is None:
        raise InvalidProcessParameters(
            "mixing needs an airflow or a ratio for both streams", field="mixing_ratios"
        )
    if r1 is not None and r2 is not None:
        utils.check_non_negative("mixing_ratios.stream1.ratio", r1)
        utils.check_non_negative("mixing_ratios.stream2.ratio", r2)
        if r1 + r2 <= 0:
            raise InvalidProcessParameters(
                "mixing ratios must not both be zero", field="mixing_ratios"
            )
        return r1 / (r1 + r2)
    if r1 is not None:
        return utils.check_range("mixing_ratios.stream1.ratio", r1, 0.0, 1.0)
    return 1.0 - utils.check_range("mixing_ratios.stream2.ratio", r2, 0.0, 1.0)


def mix(point1: StatePoint, point2: StatePoint, fraction1: float) -> tuple[float, float]:
    """(h, W) of the mix holding fraction1 of its dry air from point1."""
    f = fraction1
    h_mix = f * point1.enthalpy + (1.0 - f) * point2.enthalpy
    W_mix = f * point1.humidity + (1.0 - f) * point2.humidity
    return h_mix, W_mix


class MixingSolver(ProcessSolver):
    """Solver for adiabatic mixing of two airstreams."""

    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        ratios = utils.require_param(ctx, "mixing_ratios")
        stream1 = utils.upstream_point(ctx, ratios.stream1.point_id)
        stream2 = utils.upstream_point(ctx, ratios.stream2.point_id)
        warnings: list[str] = []

        if ratios.stream1.point_id != ctx.process.from_point_id:
            warnings.append(
                f"Mixing '{ctx.process.id}' takes stream 1 from '{ratios.stream1.point_id}', "
                f"not from its from-point '{ctx.process.from_point_id}'."
            )

        m_total = None
        airflow_total = None
        a1, a2 = ratios.stream1.airflow, ratios.stream2.airflow
        if a1 is not None and a2 is not None:
            utils.check_non_negative("mixing_ratios.stream1.airflow", a1)
            utils.check_non_negative("mixing_ratios.stream2.airflow", a2)
            m1 = a1 / stream1.specific_volume
            m2 = a2 / stream2.specific_volume
            if m1 + m2 <= 0:
                raise InvalidProcessParameters(
                    "mixing airflows must not both be zero", field="mixing_ratios"
                )
            f = m1 / (m1 + m2)
            m_total = m1 + m2
            airflow_total = a1 + a2
        else:
            f = _stream1_fraction(ratios)

        if f in (0.0, 1.0):
            label = "stream 1" if f == 1.0 else "stream 2"
            warnings.append(
                f"Mixing fraction is {f}; the mixed state equals {label} "
                f"(no actual mixing occurs)."
            )

        h_mix, W_mix = mix(stream1, stream2, f)
        # Algebraic back-calculation of Tdb from h and W, not iterative
        Tdb_mix = props.dry_bulb_from_enthalpy(h_mix, W_mix, ctx.constants)
        mixed = utils.to_point(ctx, Tdb_mix, W_mix)

        logger.debug("mixing %s: f=%.4f -> %.2f°C, W=%.5f", ctx.process.id, f, Tdb_mix, W_mix)
        results = ProcessResults(mass_flow=m_total, airflow=airflow_total)
        return ProcessOutcome(to_point=mixed, results=results, warnings=warnings)


def required_mixing_ratio(
    point1: StatePoint, point2: StatePoint, target_enthalpy: float
) -> float:
    """
    Stream-1 mass fraction that yields target_enthalpy [kJ/kg'], clipped to 0-1.

    Solves h_target = f × h_1 + (1 - f) × h_2 for f.
    """
    if point1.enthalpy is None or point2.enthalpy is None:
        raise InvalidProcessParameters("both points need an enthalpy", field="enthalpy")
    spread = point1.enthalpy - point2.enthalpy
    if abs(spread) < 1e-12:
        raise InvalidProcessParameters(
            "the two streams have the same enthalpy; any ratio gives the same mix",
            field="enthalpy",
        )
    f = (target_enthalpy - point2.enthalpy) / spread
    return max(0.0, min(1.0, f))
