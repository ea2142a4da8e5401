"""
Pydantic models for air streams and the airflow balance check.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from psychrochain.config import DEFAULT_BALANCE_THRESHOLD, Season
from psychrochain.models.state_point import StatePoint


class AirStreamType(str, Enum):
    OA = "OA"                  # Outdoor air intake
    SA = "SA"                  # Supply air
    RA = "RA"                  # Return air
    EA = "EA"                  # Exhaust air
    REA = "REA"                # Return air relieved to outdoors
    TEA = "TEA"                # Toilet exhaust
    MIXED = "Mixed"
    INTERMEDIATE = "Intermediate"


class AirStream(BaseModel):
    id: str
    name: str = ""
    type: AirStreamType
    airflow: float = Field(..., description="m³/h")
    mass_flow: Optional[float] = Field(None, description="kg/h, when known")
    state_point_id: Optional[str] = None
    season: Season = Season.BOTH


class AirflowBalance(BaseModel):
    """Derived view over a set of air streams; never stored."""

    total_supply: float
    total_exhaust: float
    total_intake: float
    total_return: float
    is_balanced: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class AirflowBalanceInput(BaseModel):
    streams: list[AirStream]
    points: list[StatePoint] = Field(default_factory=list)
    threshold: float = Field(DEFAULT_BALANCE_THRESHOLD, gt=0, lt=1)
    pressure: Optional[float] = Field(None, gt=0, description="kPa")
    constants: Optional[dict] = None
    season: Optional[Season] = None
