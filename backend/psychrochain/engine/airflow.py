"""
Airflow balance validation.

Sums the air streams of one system by type and checks:
  - supply against exhaust: SA against everything exhausted (EA + REA +
    TEA). A relative mismatch above the threshold is an error and makes
    the system unbalanced.
  - the served space: supply air (SA) against the air leaving it, i.e.
    return (RA) plus exhaust drawn directly from the space (EA, TEA).
    Return-air relief (REA) is taken out of the return stream, so it does
    not count again here. A mismatch is a warning.
  - building pressurization: outdoor intake (OA) against all exhaust. A
    mismatch is a warning, since a slightly positive building is usually
    intended.
  - stream mass flows, when given, against airflow / specific volume at
    the stream's state point.

All relative comparisons use the same threshold (5% by default).
"""

import logging
from typing import Optional, Union

from psychrochain.config import DEFAULT_BALANCE_THRESHOLD, Season
from psychrochain.engine import properties as props
from psychrochain.errors import UpstreamUnresolved
from psychrochain.models.airflow import AirflowBalance, AirStream, AirStreamType
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.state_point import StatePoint

logger = logging.getLogger(__name__)

EXHAUST_TYPES = (AirStreamType.EA, AirStreamType.REA, AirStreamType.TEA)
SPACE_EXHAUST_TYPES = (AirStreamType.EA, AirStreamType.TEA)


def stream_mass_flow(
    stream: AirStream,
    point: StatePoint,
    constants: PsychrometricConstants,
    pressure: float,
) -> float:
    """Dry-air mass flow [kg/h] of a stream at its state point."""
    if point.dry_bulb_temp is None or point.humidity is None:
        raise UpstreamUnresolved(
            f"Stream '{stream.id}' needs point '{point.id}' to be resolved",
            point_id=point.id,
        )
    return props.mass_flow_from_airflow(
        stream.airflow, point.dry_bulb_temp, point.humidity, pressure, constants
    )


def _total(streams: list[AirStream], *types: AirStreamType) -> float:
    return sum(s.airflow for s in streams if s.type in types)


def validate_airflow_balance(
    streams: list[AirStream],
    points: Optional[Union[dict[str, StatePoint], list[StatePoint]]] = None,
    constants: Optional[PsychrometricConstants] = None,
    pressure: Optional[float] = None,
    threshold: float = DEFAULT_BALANCE_THRESHOLD,
    season: Optional[Season] = None,
) -> AirflowBalance:
    """
    Check the airflow balance of a set of streams.

    Args:
        streams: Air streams of one system.
        points: State points by id (or a list), needed only for mass-flow checks.
        constants: Needed only for mass-flow checks.
        pressure: kPa; defaults to constants.standard_pressure.
        threshold: Relative tolerance for every comparison.
        season: Only consider streams of this season (and those marked both).

    Returns:
        AirflowBalance with totals, errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if season is not None:
        streams = [s for s in streams if s.season in (season, Season.BOTH)]

    valid: list[AirStream] = []
    for s in streams:
        if s.airflow < 0:
            errors.append(f"Stream '{s.id}' has negative airflow ({s.airflow} m³/h)")
        else:
            valid.append(s)

    total_supply = _total(valid, AirStreamType.SA)
    total_exhaust = _total(valid, *EXHAUST_TYPES)
    total_intake = _total(valid, AirStreamType.OA)
    total_return = _total(valid, AirStreamType.RA)

    if total_supply <= 0:
        if valid:
            errors.append("No supply air (SA) stream carries any airflow")
    else:
        imbalance = abs(total_supply - total_exhaust) / total_supply
        if imbalance > threshold:
            errors.append(
                f"Supply air {total_supply:.0f} m³/h does not match exhaust "
                f"{total_exhaust:.0f} m³/h ({imbalance * 100:.1f}% off)"
            )

        # Served space: what is supplied leaves as return or direct exhaust
        extracted = total_return + _total(valid, *SPACE_EXHAUST_TYPES)
        space_imbalance = abs(total_supply - extracted) / total_supply
        if space_imbalance > threshold:
            warnings.append(
                f"Supply air {total_supply:.0f} m³/h does not match return + space exhaust "
                f"{extracted:.0f} m³/h ({space_imbalance * 100:.1f}% off)"
            )

    # Building: outdoor intake against everything exhausted to outdoors
    largest = max(total_intake, total_exhaust)
    if largest > 0 and abs(total_intake - total_exhaust) / largest > threshold:
        sign = "positive" if total_intake > total_exhaust else "negative"
        warnings.append(
            f"Outdoor intake {total_intake:.0f} m³/h vs exhaust {total_exhaust:.0f} m³/h: "
            f"building will be under {sign} pressure"
        )

    # Mass flows
    with_mass = [s for s in valid if s.mass_flow is not None]
    if with_mass:
        if isinstance(points, list):
            points = {p.id: p for p in points}
        points = points or {}
        if constants is None:
            warnings.append("Stream mass flows not checked: no constants given")
            with_mass = []
        if pressure is None and constants is not None:
            pressure = constants.standard_pressure

    for s in with_mass:
        point = points.get(s.state_point_id) if s.state_point_id else None
        if point is None or point.dry_bulb_temp is None or point.humidity is None:
            warnings.append(
                f"Stream '{s.id}': mass flow not checked, state point "
                f"'{s.state_point_id}' is unknown or unresolved"
            )
            continue
        expected = stream_mass_flow(s, point, constants, pressure)
        if expected > 0 and abs(s.mass_flow - expected) / expected > threshold:
            errors.append(
                f"Stream '{s.id}': mass flow {s.mass_flow:.1f} kg/h is inconsistent with "
                f"{s.airflow:.0f} m³/h at '{point.id}' ({expected:.1f} kg/h)"
            )

    logger.debug(
        "airflow balance: SA=%.0f RA=%.0f OA=%.0f EX=%.0f, %d errors",
        total_supply, total_return, total_intake, total_exhaust, len(errors),
    )
    return AirflowBalance(
        total_supply=total_supply,
        total_exhaust=total_exhaust,
        total_intake=total_intake,
        total_return=total_return,
        is_balanced=not errors,
        errors=errors,
        warnings=warnings,
    )
