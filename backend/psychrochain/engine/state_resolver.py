"""
Core state point resolver.

Given a state point carrying one supported pair of independent properties,
fills in every other psychrometric property. Every pair is first reduced to
dry-bulb + humidity ratio, which is the canonical resolution path; the rest
of the properties are derived from those two.

Caller-supplied fields are never overwritten. When a caller supplies a
field that is redundant with the input pair (e.g. a measured dew point),
it is kept and compared with the computed value; a disagreement beyond the
tolerance is returned as a warning, not an error.
"""

import logging
from typing import Callable, Optional

from psychrochain.config import INPUT_FIELDS, SUPPORTED_INPUT_PAIRS, InputPair
from psychrochain.engine import properties as props
from psychrochain.errors import AmbiguousInput
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.state_point import (
    DryBulbEnthalpy,
    DryBulbHumidity,
    DryBulbRH,
    DryBulbWetBulb,
    StateInput,
    StatePoint,
    StatePointResolution,
)

logger = logging.getLogger(__name__)

_VARIANTS = {
    InputPair.DRY_BULB_RH: DryBulbRH,
    InputPair.DRY_BULB_WET_BULB: DryBulbWetBulb,
    InputPair.DRY_BULB_HUMIDITY: DryBulbHumidity,
    InputPair.DRY_BULB_ENTHALPY: DryBulbEnthalpy,
}

# A redundant caller value is flagged when it differs from the computed one
# by more than convergence_tolerance × scale (0.1 °C, 1 %RH, 0.1 g/kg,
# 0.5 kJ/kg', 0.001 m³/kg' at the default tolerance).
_REDUNDANCY_SCALE = {
    "dry_bulb_temp": 100.0,
    "wet_bulb_temp": 100.0,
    "dew_point": 100.0,
    "relative_humidity": 1000.0,
    "humidity": 0.1,
    "enthalpy": 500.0,
    "specific_volume": 1.0,
}


def state_input_of(point: StatePoint) -> StateInput:
    """
    Pick the input variant of a state point.

    Uses point.input_pair when set; otherwise the supplied input fields must
    form exactly one supported pair.

    Raises:
        AmbiguousInput: the supplied fields do not identify one supported pair.
    """
    supplied = {f for f in INPUT_FIELDS if getattr(point, f) is not None}

    if point.input_pair is not None:
        pair = InputPair(point.input_pair)
        missing = [f for f in SUPPORTED_INPUT_PAIRS[pair] if getattr(point, f) is None]
        if missing:
            raise AmbiguousInput(
                f"State point '{point.id}' declares input pair '{pair.value}' "
                f"but is missing {', '.join(missing)}"
            )
    else:
        matches = [
            p for p, fields in SUPPORTED_INPUT_PAIRS.items() if set(fields) == supplied
        ]
        if len(matches) != 1:
            supported = [f"({a}, {b})" for a, b in SUPPORTED_INPUT_PAIRS.values()]
            raise AmbiguousInput(
                f"State point '{point.id}' supplies {sorted(supplied) or 'no inputs'}; "
                f"exactly one of these pairs is required: {', '.join(supported)}"
            )
        pair = matches[0]

    fields = SUPPORTED_INPUT_PAIRS[pair]
    return _VARIANTS[pair](**{f: getattr(point, f) for f in fields})


# ---------------------------------------------------------------------------
# Reduction of each input pair to (Tdb, W)
# ---------------------------------------------------------------------------

def _from_dry_bulb_rh(si: DryBulbRH, pressure: float, constants: PsychrometricConstants) -> float:
    return props.absolute_humidity(si.dry_bulb_temp, si.relative_humidity, pressure, constants)


def _from_dry_bulb_wet_bulb(si: DryBulbWetBulb, pressure: float, constants: PsychrometricConstants) -> float:
    return props.humidity_from_wet_bulb(si.dry_bulb_temp, si.wet_bulb_temp, pressure, constants)


def _from_dry_bulb_humidity(si: DryBulbHumidity, pressure: float, constants: PsychrometricConstants) -> float:
    return props.check_humidity_ceiling(si.humidity, constants)


def _from_dry_bulb_enthalpy(si: DryBulbEnthalpy, pressure: float, constants: PsychrometricConstants) -> float:
    return props.humidity_from_enthalpy(si.dry_bulb_temp, si.enthalpy, constants)


_HUMIDITY_SOLVERS: dict[type, Callable] = {
    DryBulbRH: _from_dry_bulb_rh,
    DryBulbWetBulb: _from_dry_bulb_wet_bulb,
    DryBulbHumidity: _from_dry_bulb_humidity,
    DryBulbEnthalpy: _from_dry_bulb_enthalpy,
}


def _calc_all_from_tdb_w(
    Tdb: float,
    W: float,
    pressure: float,
    constants: PsychrometricConstants,
    include_wet_bulb: bool,
) -> dict[str, Optional[float]]:
    """Given Tdb and W, calculate every derived property."""
    return {
        "dry_bulb_temp": Tdb,
        "humidity": W,
        "relative_humidity": props.relative_humidity_from_humidity(Tdb, W, pressure, constants),
        "enthalpy": props.enthalpy(Tdb, W, constants),
        "dew_point": props.dew_point(W, pressure, constants) if W > 0 else None,
        "specific_volume": props.specific_volume(Tdb, W, pressure, constants),
        "wet_bulb_temp": (
            props.wet_bulb_from_humidity(Tdb, W, pressure, constants)
            if include_wet_bulb
            else None
        ),
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_state_point(
    point: StatePoint,
    constants: PsychrometricConstants,
    pressure: float,
    include_wet_bulb: bool = False,
) -> StatePointResolution:
    """
    Main entry point. Completes a state point from its input pair.

    Args:
        point: Caller-owned state point; it is not modified.
        constants: Physical constants and solver settings.
        pressure: Ambient pressure in kPa.
        include_wet_bulb: Also back-solve the wet bulb when it is not an input.

    Returns:
        StatePointResolution with a completed copy of the point and any
        redundancy warnings.

    Raises:
        AmbiguousInput, OutOfPhysicalRange, ConvergenceFailure
    """
    state_input = state_input_of(point)
    W = _HUMIDITY_SOLVERS[type(state_input)](state_input, pressure, constants)
    # A supplied wet bulb that is not an input is checked like any other redundant field
    check_wet_bulb = point.wet_bulb_temp is not None and not isinstance(state_input, DryBulbWetBulb)
    computed = _calc_all_from_tdb_w(
        state_input.dry_bulb_temp, W, pressure, constants, include_wet_bulb or check_wet_bulb
    )

    warnings: list[str] = []
    update: dict = {"input_pair": InputPair(state_input.pair)}
    for field, value in computed.items():
        if value is None:
            continue
        supplied = getattr(point, field)
        if supplied is None:
            update[field] = value
            continue
        limit = constants.convergence_tolerance * _REDUNDANCY_SCALE[field]
        if abs(supplied - value) > limit:
            warnings.append(
                f"{point.id}: supplied {field}={supplied:.6g} differs from the "
                f"computed value {value:.6g}"
            )

    if computed["dew_point"] is None and point.dew_point is None:
        warnings.append(f"{point.id}: dew point is undefined for perfectly dry air")

    logger.debug("resolved state point %s via %s", point.id, state_input.pair)
    return StatePointResolution(point=point.model_copy(update=update), warnings=warnings)


def resolve_input(
    state_input: StateInput,
    constants: PsychrometricConstants,
    pressure: float,
    include_wet_bulb: bool = False,
    **identity,
) -> StatePoint:
    """Resolve a bare input variant into a new, complete StatePoint."""
    identity.setdefault("id", "")
    point = StatePoint.from_input(state_input, **identity)
    return resolve_state_point(point, constants, pressure, include_wet_bulb).point
