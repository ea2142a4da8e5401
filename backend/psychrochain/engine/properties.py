"""
Psychrometric property calculator.

Pure functions of moist-air state, all parameterized by an explicit
PsychrometricConstants and (where relevant) the ambient pressure in kPa.

Saturation vapour pressure uses the Tetens equation with separate
coefficient sets over liquid water (t >= 0 °C) and over ice (t < 0 °C).
The wet-bulb relations use the ventilated psychrometer equation

    Pv = Ps(twb) - A × P × (t - twb)

with A = constants.wet_bulb_coefficient. Given the wet bulb it yields Pv
directly, so humidity follows in closed form. The other direction has no
closed form and goes through scipy's Newton-Raphson with the iteration
budget and tolerance taken from the constants, so an input that does not
converge is reported rather than silently clamped.
"""

import logging
import math

import psychrolib
from scipy.optimize import newton

from psychrochain.errors import ConvergenceFailure, OutOfPhysicalRange
from psychrochain.models.constants import PsychrometricConstants, TetensCoefficients

logger = logging.getLogger(__name__)

# Ratio of molecular weights used in the ideal-gas specific volume (1/0.622)
_VOLUME_HUMIDITY_FACTOR = 1.6078

# Rounding allowance before a computed RH above 100% counts as supersaturated
_RH_ROUNDING = 1e-6


# ---------------------------------------------------------------------------
# Range checks
# ---------------------------------------------------------------------------

def _check_temperature(temp: float, constants: PsychrometricConstants, name: str = "temperature") -> None:
    if not math.isfinite(temp):
        raise OutOfPhysicalRange(f"{name} must be a finite number, got {temp}")
    if temp < constants.min_temperature or temp > constants.max_temperature:
        raise OutOfPhysicalRange(
            f"{name} {temp:.3f}°C is outside the range "
            f"[{constants.min_temperature}, {constants.max_temperature}]°C"
        )


def _check_pressure(pressure: float) -> None:
    if not math.isfinite(pressure) or pressure <= 0:
        raise OutOfPhysicalRange(f"pressure must be positive, got {pressure} kPa")


def _check_humidity(humidity: float) -> None:
    if not math.isfinite(humidity) or humidity < 0:
        raise OutOfPhysicalRange(f"humidity must be non-negative, got {humidity} kg/kg'")


def check_humidity_ceiling(humidity: float, constants: PsychrometricConstants) -> float:
    """Reject a humidity ratio above constants.max_humidity."""
    if humidity > constants.max_humidity:
        raise OutOfPhysicalRange(
            f"humidity {humidity:.5f} kg/kg' exceeds the ceiling {constants.max_humidity} kg/kg'"
        )
    return humidity


def _tetens(temp: float, constants: PsychrometricConstants) -> TetensCoefficients:
    return constants.tetens_water if temp >= 0 else constants.tetens_ice


def _humidity_ratio(pv: float, pressure: float, constants: PsychrometricConstants) -> float:
    """W = ε × Pv / (P - Pv), without range checks."""
    return constants.molecular_weight_ratio * pv / (pressure - pv)


# ---------------------------------------------------------------------------
# Saturation
# ---------------------------------------------------------------------------

def saturation_vapor_pressure(temp: float, constants: PsychrometricConstants) -> float:
    """Saturation vapour pressure [kPa] at temp [°C] (Tetens)."""
    _check_temperature(temp, constants)
    c = _tetens(temp, constants)
    return c.A * math.exp(c.B * temp / (c.C + temp))


def saturation_pressure_derivative(temp: float, constants: PsychrometricConstants) -> float:
    """dPs/dt [kPa/K] = Ps × B × C / (C + t)²."""
    c = _tetens(temp, constants)
    ps = saturation_vapor_pressure(temp, constants)
    return ps * c.B * c.C / (c.C + temp) ** 2


def vapor_pressure_from_humidity(
    humidity: float, pressure: float, constants: PsychrometricConstants
) -> float:
    """Partial vapour pressure [kPa]: Pv = W × P / (ε + W)."""
    _check_humidity(humidity)
    _check_pressure(pressure)
    return humidity * pressure / (constants.molecular_weight_ratio + humidity)


# ---------------------------------------------------------------------------
# Humidity
# ---------------------------------------------------------------------------

def absolute_humidity(
    dry_bulb_temp: float,
    relative_humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """
    Humidity ratio [kg/kg'] from dry-bulb [°C] and relative humidity [%].

    Raises:
        OutOfPhysicalRange: RH outside [0, 100], vapour pressure at or above
            the total pressure, or a result above constants.max_humidity.
    """
    _check_pressure(pressure)
    if not math.isfinite(relative_humidity) or not 0.0 <= relative_humidity <= 100.0:
        raise OutOfPhysicalRange(
            f"relative humidity must be between 0 and 100%, got {relative_humidity}"
        )

    pv = relative_humidity / 100.0 * saturation_vapor_pressure(dry_bulb_temp, constants)
    if pv >= pressure:
        raise OutOfPhysicalRange(
            f"vapour pressure {pv:.3f} kPa reaches the total pressure {pressure} kPa"
        )

    humidity = _humidity_ratio(pv, pressure, constants)
    if humidity > constants.max_humidity:
        raise OutOfPhysicalRange(
            f"humidity {humidity:.5f} kg/kg' exceeds the ceiling "
            f"{constants.max_humidity} kg/kg' at {dry_bulb_temp}°C, {relative_humidity}%"
        )
    return humidity


def saturation_humidity(
    temp: float, pressure: float, constants: PsychrometricConstants
) -> float:
    """Humidity ratio of saturated air at temp [°C]."""
    return absolute_humidity(temp, 100.0, pressure, constants)


def relative_humidity_from_humidity(
    dry_bulb_temp: float,
    humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """Relative humidity [%] from dry-bulb and humidity ratio (closed form)."""
    pv = vapor_pressure_from_humidity(humidity, pressure, constants)
    rh = pv / saturation_vapor_pressure(dry_bulb_temp, constants) * 100.0
    if rh > 100.0 + _RH_ROUNDING:
        raise OutOfPhysicalRange(
            f"humidity {humidity:.5f} kg/kg' is supersaturated at {dry_bulb_temp:.2f}°C "
            f"(RH would be {rh:.1f}%)"
        )
    return min(rh, 100.0)


# ---------------------------------------------------------------------------
# Enthalpy
# ---------------------------------------------------------------------------

def enthalpy(dry_bulb_temp: float, humidity: float, constants: PsychrometricConstants) -> float:
    """Moist air enthalpy [kJ/kg']: h = cp_a × t + W × (L0 + cp_v × t)."""
    return constants.cp_air * dry_bulb_temp + humidity * (
        constants.latent_heat_0c + constants.cp_vapor * dry_bulb_temp
    )


def humidity_from_enthalpy(
    dry_bulb_temp: float, enthalpy_value: float, constants: PsychrometricConstants
) -> float:
    """Inverse of enthalpy() for W at a known dry-bulb."""
    _check_temperature(dry_bulb_temp, constants, "dry-bulb temperature")
    humidity = (enthalpy_value - constants.cp_air * dry_bulb_temp) / (
        constants.latent_heat_0c + constants.cp_vapor * dry_bulb_temp
    )
    if humidity < 0:
        raise OutOfPhysicalRange(
            f"enthalpy {enthalpy_value:.2f} kJ/kg' is below dry air enthalpy "
            f"at {dry_bulb_temp}°C"
        )
    return check_humidity_ceiling(humidity, constants)


def dry_bulb_from_enthalpy(
    enthalpy_value: float, humidity: float, constants: PsychrometricConstants
) -> float:
    """Inverse of enthalpy() for t at a known humidity ratio."""
    _check_humidity(humidity)
    temp = (enthalpy_value - humidity * constants.latent_heat_0c) / (
        constants.cp_air + humidity * constants.cp_vapor
    )
    _check_temperature(temp, constants, "dry-bulb temperature")
    return temp


def moist_air_specific_heat(humidity: float, constants: PsychrometricConstants) -> float:
    """cp of moist air per kg dry air [kJ/(kg·K)]."""
    return constants.cp_air + humidity * constants.cp_vapor


# ---------------------------------------------------------------------------
# Dew point
# ---------------------------------------------------------------------------

def _inverse_tetens(pv: float, c: TetensCoefficients) -> float:
    ln_ratio = math.log(pv / c.A)
    return c.C * ln_ratio / (c.B - ln_ratio)


def saturation_temperature(vapor_pressure: float, constants: PsychrometricConstants) -> float:
    """
    Temperature [°C] at which vapor_pressure [kPa] is the saturation pressure.

    Solved on the water branch first; a result below 0 °C means the vapour
    condenses as frost, so it is solved once more with the ice coefficients.
    """
    if vapor_pressure <= 0:
        raise OutOfPhysicalRange("saturation temperature is undefined for zero vapour pressure")
    temp = _inverse_tetens(vapor_pressure, constants.tetens_water)
    if temp < 0:
        temp = _inverse_tetens(vapor_pressure, constants.tetens_ice)
    return temp


def dew_point(humidity: float, pressure: float, constants: PsychrometricConstants) -> float:
    """Dew point [°C] for a humidity ratio (frost point below 0 °C)."""
    pv = vapor_pressure_from_humidity(humidity, pressure, constants)
    if pv <= 0:
        raise OutOfPhysicalRange("dew point is undefined for perfectly dry air")

    temp = saturation_temperature(pv, constants)
    _check_temperature(temp, constants, "dew point")
    return temp


# ---------------------------------------------------------------------------
# Volume and flow
# ---------------------------------------------------------------------------

def specific_volume(
    dry_bulb_temp: float,
    humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """Specific volume [m³/kg'] from the ideal-gas relation."""
    _check_temperature(dry_bulb_temp, constants, "dry-bulb temperature")
    _check_humidity(humidity)
    _check_pressure(pressure)
    return (
        constants.r_air
        * (dry_bulb_temp + 273.15)
        * (1 + _VOLUME_HUMIDITY_FACTOR * humidity)
        / pressure
    )


def air_density(
    dry_bulb_temp: float,
    humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """Dry-air density [kg'/m³] = 1 / v."""
    return 1.0 / specific_volume(dry_bulb_temp, humidity, pressure, constants)


def mass_flow_from_airflow(
    airflow: float,
    dry_bulb_temp: float,
    humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """Dry-air mass flow [kg/h] for a volumetric airflow [m³/h]."""
    if not math.isfinite(airflow) or airflow < 0:
        raise OutOfPhysicalRange(f"airflow must be non-negative, got {airflow} m³/h")
    return airflow / specific_volume(dry_bulb_temp, humidity, pressure, constants)


# ---------------------------------------------------------------------------
# Wet bulb (iterative)
# ---------------------------------------------------------------------------

def wet_bulb_from_humidity(
    dry_bulb_temp: float,
    humidity: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """
    Wet-bulb temperature [°C] from dry-bulb and humidity ratio.

    Newton-Raphson on g(twb) = Ps(twb) - A·P·(t - twb) - Pv, started at the
    dry-bulb temperature (g >= 0 there) so the iteration sequence is the same
    for identical inputs.

    Raises:
        OutOfPhysicalRange: supersaturated input or an iterate leaving the
            temperature band.
        ConvergenceFailure: no convergence within constants.max_iterations.
    """
    _check_temperature(dry_bulb_temp, constants, "dry-bulb temperature")
    pv = vapor_pressure_from_humidity(humidity, pressure, constants)
    if pv > saturation_vapor_pressure(dry_bulb_temp, constants) * (1 + _RH_ROUNDING):
        raise OutOfPhysicalRange(
            f"humidity {humidity:.5f} kg/kg' is supersaturated at {dry_bulb_temp:.2f}°C"
        )
    if pv >= saturation_vapor_pressure(dry_bulb_temp, constants):
        return dry_bulb_temp

    a_p = constants.wet_bulb_coefficient * pressure

    def residual(twb: float) -> float:
        return saturation_vapor_pressure(twb, constants) - a_p * (dry_bulb_temp - twb) - pv

    def slope(twb: float) -> float:
        return saturation_pressure_derivative(twb, constants) + a_p

    twb, info = newton(
        residual,
        dry_bulb_temp,
        fprime=slope,
        tol=constants.convergence_tolerance,
        maxiter=constants.max_iterations,
        full_output=True,
        disp=False,
    )
    if not info.converged:
        raise ConvergenceFailure(
            f"wet-bulb solve did not converge within {constants.max_iterations} "
            f"iterations (t={dry_bulb_temp}, W={humidity})",
            iterations=info.iterations,
        )

    logger.debug("wet bulb converged in %d iterations: %.4f°C", info.iterations, twb)
    return min(float(twb), dry_bulb_temp)


def humidity_from_wet_bulb(
    dry_bulb_temp: float,
    wet_bulb_temp: float,
    pressure: float,
    constants: PsychrometricConstants,
) -> float:
    """
    Humidity ratio [kg/kg'] from dry-bulb and wet-bulb temperatures.

    The psychrometer equation gives Pv = Ps(twb) - A·P·(t - twb), and
    W = ε·Pv / (P - Pv) follows without iteration.

    Raises:
        OutOfPhysicalRange: wet bulb above dry bulb, or a psychrometer
            balance implying negative vapour pressure.
    """
    _check_pressure(pressure)
    _check_temperature(dry_bulb_temp, constants, "dry-bulb temperature")
    _check_temperature(wet_bulb_temp, constants, "wet-bulb temperature")
    if wet_bulb_temp > dry_bulb_temp:
        raise OutOfPhysicalRange(
            f"wet-bulb temperature {wet_bulb_temp}°C is above the dry-bulb "
            f"temperature {dry_bulb_temp}°C"
        )

    ps_wb = saturation_vapor_pressure(wet_bulb_temp, constants)
    if ps_wb >= pressure:
        raise OutOfPhysicalRange(
            f"saturation pressure at {wet_bulb_temp}°C reaches the total pressure"
        )
    pv_target = ps_wb - constants.wet_bulb_coefficient * pressure * (dry_bulb_temp - wet_bulb_temp)
    if pv_target < 0:
        raise OutOfPhysicalRange(
            f"wet-bulb depression {dry_bulb_temp - wet_bulb_temp:.2f} K is too large "
            f"for {dry_bulb_temp}°C; the air would need negative vapour pressure"
        )

    humidity = _humidity_ratio(pv_target, pressure, constants)
    logger.debug("humidity from wet bulb: %.6f kg/kg'", humidity)
    return check_humidity_ceiling(humidity, constants)


# ---------------------------------------------------------------------------
# Site pressure
# ---------------------------------------------------------------------------

def pressure_from_altitude(altitude: float) -> float:
    """
    Standard-atmosphere pressure [kPa] at a site altitude [m].

    Uses psychrolib's standard atmosphere model.
    """
    psychrolib.SetUnitSystem(psychrolib.SI)
    return psychrolib.GetStandardAtmPressure(altitude) / 1000.0
