"""
Pydantic models for project design conditions.

Outdoor and indoor design states per season plus the design airflows. These
seed the outdoor-air and room-air state points and the air streams of a
project.
"""

from typing import Optional

from pydantic import BaseModel, Field

from psychrochain.config import STANDARD_PRESSURE_KPA
from psychrochain.models.state_point import StatePoint


class SeasonCondition(BaseModel):
    dry_bulb_temp: float = Field(..., description="°C")
    relative_humidity: float = Field(..., ge=0, le=100, description="%")
    wet_bulb_temp: Optional[float] = Field(None, description="°C, outdoor only")


class OutdoorConditions(BaseModel):
    summer: SeasonCondition
    winter: SeasonCondition
    pressure: float = Field(STANDARD_PRESSURE_KPA, gt=0, description="kPa")


class IndoorConditions(BaseModel):
    summer: SeasonCondition
    winter: SeasonCondition


class AirflowConditions(BaseModel):
    supply_air: float = Field(..., ge=0, description="m³/h")
    outdoor_air: float = Field(..., ge=0, description="m³/h")
    return_air: float = Field(..., ge=0, description="m³/h")
    exhaust_air: float = Field(..., ge=0, description="m³/h")
    toilet_exhaust: float = Field(0.0, ge=0, description="m³/h")


class DesignConditions(BaseModel):
    outdoor: OutdoorConditions
    indoor: IndoorConditions
    airflow: AirflowConditions


class DesignPoints(BaseModel):
    """Resolved design state points and any redundancy warnings."""

    points: list[StatePoint]
    warnings: list[str] = Field(default_factory=list)
