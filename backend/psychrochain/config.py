"""
PsychroChain configuration and constants.

Everything here is a plain default value. The engine itself never reads
these directly; callers build a PsychrometricConstants from them (see
psychrochain.models.constants.load_constants) and pass it explicitly.
Only the HTTP layer reads the environment (CORS_ORIGINS).
"""

import os
from enum import Enum

SERVICE_NAME = "psychrochain"
SERVICE_VERSION = "0.1.0"

# Browser origins allowed to call the API, comma separated
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "PSYCHROCHAIN_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]


class Season(str, Enum):
    SUMMER = "summer"
    WINTER = "winter"
    BOTH = "both"


class InputPair(str, Enum):
    """Supported input pair combinations for state point resolution."""

    DRY_BULB_RH = "dry_bulb_rh"
    DRY_BULB_WET_BULB = "dry_bulb_wet_bulb"
    DRY_BULB_HUMIDITY = "dry_bulb_humidity"
    DRY_BULB_ENTHALPY = "dry_bulb_enthalpy"


# Each pair must consist of two independent psychrometric properties.
# The field names are StatePoint attribute names.
SUPPORTED_INPUT_PAIRS: dict[InputPair, tuple[str, str]] = {
    InputPair.DRY_BULB_RH: ("dry_bulb_temp", "relative_humidity"),
    InputPair.DRY_BULB_WET_BULB: ("dry_bulb_temp", "wet_bulb_temp"),
    InputPair.DRY_BULB_HUMIDITY: ("dry_bulb_temp", "humidity"),
    InputPair.DRY_BULB_ENTHALPY: ("dry_bulb_temp", "enthalpy"),
}

# Fields that may appear as the caller's input side of a state point
INPUT_FIELDS = (
    "dry_bulb_temp",
    "wet_bulb_temp",
    "relative_humidity",
    "humidity",
    "enthalpy",
)

# Standard atmospheric pressure at sea level
STANDARD_PRESSURE_KPA = 101.325

# Default physical constants (SI: °C, kPa, kJ/kg')
DEFAULT_CP_AIR = 1.006            # kJ/(kg·K) dry air
DEFAULT_CP_VAPOR = 1.805          # kJ/(kg·K) water vapour
DEFAULT_LATENT_HEAT_0C = 2501.0   # kJ/kg
DEFAULT_MOLECULAR_WEIGHT_RATIO = 0.622
DEFAULT_R_AIR = 0.287             # kJ/(kg·K)
DEFAULT_WET_BULB_COEFFICIENT = 0.000662  # 1/K, ventilated psychrometer constant
DEFAULT_CONVERGENCE_TOLERANCE = 0.001
DEFAULT_MAX_ITERATIONS = 100

# Tetens coefficients: Ps [kPa] = A * exp(B * t / (C + t))
TETENS_WATER = {"A": 0.61078, "B": 17.27, "C": 237.3}
TETENS_ICE = {"A": 0.61078, "B": 21.875, "C": 265.5}

# Sanity band for any temperature entering or leaving the engine
DEFAULT_MIN_TEMPERATURE = -60.0   # °C
DEFAULT_MAX_TEMPERATURE = 100.0   # °C
DEFAULT_MAX_HUMIDITY = 0.05       # kg/kg'

# Water side
WATER_CP = 4.186                  # kJ/(kg·K)
DEFAULT_WATER_TEMP_DIFF = 7.0     # °C, chilled/hot water coil ΔT
DEFAULT_SPRAY_WATER_TEMP = 15.0   # °C
DEFAULT_STEAM_TEMP = 100.0        # °C

# Airflow balance
DEFAULT_BALANCE_THRESHOLD = 0.05  # relative
