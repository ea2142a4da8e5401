"""
Pydantic model for the physical constants and solver settings.

A PsychrometricConstants instance is built once per calculation context
(e.g. one for summer design, one for winter) and passed explicitly into
every engine call. It is frozen so it can be shared freely.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from psychrochain.config import (
    STANDARD_PRESSURE_KPA,
    DEFAULT_CP_AIR,
    DEFAULT_CP_VAPOR,
    DEFAULT_LATENT_HEAT_0C,
    DEFAULT_MOLECULAR_WEIGHT_RATIO,
    DEFAULT_R_AIR,
    DEFAULT_WET_BULB_COEFFICIENT,
    DEFAULT_CONVERGENCE_TOLERANCE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MIN_TEMPERATURE,
    DEFAULT_MAX_TEMPERATURE,
    DEFAULT_MAX_HUMIDITY,
    TETENS_WATER,
    TETENS_ICE,
)


class TetensCoefficients(BaseModel):
    """Coefficients of Ps = A * exp(B * t / (C + t)), Ps in kPa."""

    model_config = ConfigDict(frozen=True)

    A: float = Field(..., gt=0)
    B: float = Field(..., gt=0)
    C: float = Field(..., gt=0)


class PsychrometricConstants(BaseModel):
    """Physical constants and solver settings for one calculation context."""

    model_config = ConfigDict(frozen=True)

    standard_pressure: float = Field(STANDARD_PRESSURE_KPA, gt=0, description="kPa")
    cp_air: float = Field(DEFAULT_CP_AIR, gt=0, description="kJ/(kg·K)")
    cp_vapor: float = Field(DEFAULT_CP_VAPOR, gt=0, description="kJ/(kg·K)")
    latent_heat_0c: float = Field(DEFAULT_LATENT_HEAT_0C, gt=0, description="kJ/kg")
    molecular_weight_ratio: float = Field(DEFAULT_MOLECULAR_WEIGHT_RATIO, gt=0)
    r_air: float = Field(DEFAULT_R_AIR, gt=0, description="kJ/(kg·K)")
    wet_bulb_coefficient: float = Field(
        DEFAULT_WET_BULB_COEFFICIENT,
        gt=0,
        description="Psychrometer constant A in Pv = Ps(twb) - A·P·(t - twb), 1/K",
    )
    convergence_tolerance: float = Field(
        DEFAULT_CONVERGENCE_TOLERANCE,
        gt=0,
        description="Step tolerance in °C; humidity solves use it in g/kg",
    )
    max_iterations: int = Field(DEFAULT_MAX_ITERATIONS, gt=0)
    tetens_water: TetensCoefficients = Field(
        default_factory=lambda: TetensCoefficients(**TETENS_WATER)
    )
    tetens_ice: TetensCoefficients = Field(
        default_factory=lambda: TetensCoefficients(**TETENS_ICE)
    )
    min_temperature: float = DEFAULT_MIN_TEMPERATURE
    max_temperature: float = DEFAULT_MAX_TEMPERATURE
    max_humidity: float = Field(DEFAULT_MAX_HUMIDITY, gt=0, description="kg/kg'")

    @model_validator(mode="after")
    def _check_temperature_band(self) -> "PsychrometricConstants":
        if self.min_temperature >= self.max_temperature:
            raise ValueError(
                f"min_temperature ({self.min_temperature}) must be below "
                f"max_temperature ({self.max_temperature})"
            )
        return self

    @property
    def humidity_tolerance(self) -> float:
        """convergence_tolerance expressed in kg/kg' (tolerance is in g/kg)."""
        return self.convergence_tolerance * 1e-3


def load_constants(overrides: Optional[dict] = None) -> PsychrometricConstants:
    """
    Build constants from the defaults merged with caller overrides.

    Nested Tetens coefficient sets are merged key by key, so
    {"tetens_ice": {"B": 22.5}} keeps the default A and C.
    """
    overrides = dict(overrides or {})
    for key in ("tetens_water", "tetens_ice"):
        if key in overrides and isinstance(overrides[key], dict):
            base = TETENS_WATER if key == "tetens_water" else TETENS_ICE
            overrides[key] = {**base, **overrides[key]}
    return PsychrometricConstants(**overrides)
