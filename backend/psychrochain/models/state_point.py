"""
Pydantic models for state points.

A StatePoint is the caller-owned record: identity plus optional property
fields, exactly two of which are the independent inputs. The input side is
also expressible as a discriminated variant (StateInput) so callers that
build points programmatically cannot produce an ambiguous pair.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from psychrochain.config import InputPair, Season


# ---------------------------------------------------------------------------
# Input variants
# ---------------------------------------------------------------------------

class DryBulbRH(BaseModel):
    pair: Literal["dry_bulb_rh"] = "dry_bulb_rh"
    dry_bulb_temp: float = Field(..., description="°C")
    relative_humidity: float = Field(..., description="%")


class DryBulbWetBulb(BaseModel):
    pair: Literal["dry_bulb_wet_bulb"] = "dry_bulb_wet_bulb"
    dry_bulb_temp: float = Field(..., description="°C")
    wet_bulb_temp: float = Field(..., description="°C")


class DryBulbHumidity(BaseModel):
    pair: Literal["dry_bulb_humidity"] = "dry_bulb_humidity"
    dry_bulb_temp: float = Field(..., description="°C")
    humidity: float = Field(..., description="kg/kg'")


class DryBulbEnthalpy(BaseModel):
    pair: Literal["dry_bulb_enthalpy"] = "dry_bulb_enthalpy"
    dry_bulb_temp: float = Field(..., description="°C")
    enthalpy: float = Field(..., description="kJ/kg'")


StateInput = Annotated[
    Union[DryBulbRH, DryBulbWetBulb, DryBulbHumidity, DryBulbEnthalpy],
    Field(discriminator="pair"),
]


# ---------------------------------------------------------------------------
# State point record
# ---------------------------------------------------------------------------

class StatePoint(BaseModel):
    """An air condition at one point of the handling sequence."""

    id: str
    name: str = ""
    season: Season = Season.BOTH
    order: int = 0

    # Which pair of the fields below the caller considers the inputs.
    # Filled by the resolver so a completed point resolves again identically.
    input_pair: Optional[InputPair] = None

    # Input-capable properties
    dry_bulb_temp: Optional[float] = Field(None, description="Dry-bulb temperature, °C")
    wet_bulb_temp: Optional[float] = Field(None, description="Wet-bulb temperature, °C")
    relative_humidity: Optional[float] = Field(None, description="Relative humidity, %")
    humidity: Optional[float] = Field(None, description="Humidity ratio, kg/kg'")

    # Derived properties (enthalpy may also be an input)
    enthalpy: Optional[float] = Field(None, description="Specific enthalpy, kJ/kg'")
    dew_point: Optional[float] = Field(None, description="Dew point temperature, °C")
    specific_volume: Optional[float] = Field(None, description="Specific volume, m³/kg'")

    @property
    def is_resolved(self) -> bool:
        """True when every property a process needs has been derived."""
        return None not in (
            self.dry_bulb_temp,
            self.humidity,
            self.enthalpy,
            self.specific_volume,
        )

    @classmethod
    def from_input(cls, state_input: "StateInput", **identity) -> "StatePoint":
        """Build a point whose inputs are exactly the given variant."""
        values = state_input.model_dump(exclude={"pair"})
        return cls(input_pair=state_input.pair, **identity, **values)


class StatePointResolution(BaseModel):
    """A completed state point plus non-fatal diagnostics."""

    point: StatePoint
    warnings: list[str] = Field(default_factory=list)


class StatePointRequest(BaseModel):
    """Input model for resolving one state point over HTTP."""

    point: StatePoint
    include_wet_bulb: bool = False
    pressure: Optional[float] = Field(None, gt=0, description="kPa; standard pressure when omitted")
    constants: Optional[dict] = Field(None, description="Overrides of the default constants")
