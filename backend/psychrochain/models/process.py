"""
Pydantic models for air-handling processes.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from psychrochain.config import Season
from psychrochain.models.state_point import StatePoint


class ProcessType(str, Enum):
    HEATING = "heating"
    COOLING = "cooling"
    HUMIDIFYING = "humidifying"
    DEHUMIDIFYING = "dehumidifying"
    MIXING = "mixing"
    HEAT_EXCHANGE = "heat_exchange"
    FAN_HEATING = "fan_heating"
    AIR_SUPPLY = "air_supply"


class HumidifierType(str, Enum):
    STEAM = "steam"
    WATER = "water"


class MixingStream(BaseModel):
    """One entering stream of a mixing box."""

    point_id: str
    airflow: Optional[float] = Field(None, description="m³/h")
    ratio: Optional[float] = Field(None, description="Fraction of the mixed mass flow, 0-1")


class MixingRatios(BaseModel):
    stream1: MixingStream
    stream2: MixingStream


class ProcessParameters(BaseModel):
    """Type-specific parameter bag. Each solver reads only its own fields."""

    # Common
    airflow: Optional[float] = Field(None, description="m³/h")

    # Heating / cooling coils
    capacity: Optional[float] = Field(None, description="kW")
    target_temp: Optional[float] = Field(None, description="Leaving dry-bulb, °C")
    shf: Optional[float] = Field(None, description="Sensible heat factor, 0-1")
    outlet_rh: Optional[float] = Field(None, description="Leaving relative humidity, %")
    apparatus_dew_point: Optional[float] = Field(None, description="ADP, °C")
    bypass_factor: Optional[float] = Field(None, description="0-1")
    water_temp_diff: Optional[float] = Field(None, description="Coil water ΔT, °C")
    water_flow_rate: Optional[float] = Field(None, description="Coil water flow, L/min")

    # Humidifying / dehumidifying
    humidifying_capacity: Optional[float] = Field(None, description="kg/h of water")
    humidifier_type: Optional[HumidifierType] = None
    steam_temp: Optional[float] = Field(None, description="°C")
    water_temp: Optional[float] = Field(None, description="Spray water temperature, °C")

    # Mixing
    mixing_ratios: Optional[MixingRatios] = None

    # Heat exchange
    exhaust_point_id: Optional[str] = None
    exhaust_outlet_point_id: Optional[str] = None
    heat_exchange_efficiency: Optional[float] = Field(None, description="Total efficiency, %")
    sensible_efficiency: Optional[float] = Field(None, description="%")
    latent_efficiency: Optional[float] = Field(None, description="%")
    supply_airflow: Optional[float] = Field(None, description="m³/h")
    exhaust_airflow: Optional[float] = Field(None, description="m³/h")
    supply_airflow_in: Optional[float] = Field(None, description="m³/h")
    supply_airflow_out: Optional[float] = Field(None, description="m³/h")
    exhaust_airflow_in: Optional[float] = Field(None, description="m³/h")
    exhaust_airflow_out: Optional[float] = Field(None, description="m³/h")

    # Fan
    fan_power: Optional[float] = Field(None, description="kW")
    fan_efficiency: Optional[float] = Field(None, description="%")


class ProcessResults(BaseModel):
    """Energy and state deltas of one executed process."""

    sensible_heat: Optional[float] = Field(None, description="kW")
    latent_heat: Optional[float] = Field(None, description="kW")
    total_heat: Optional[float] = Field(None, description="kW")
    enthalpy_diff: Optional[float] = Field(None, description="kJ/kg', to - from")
    humidity_diff: Optional[float] = Field(None, description="kg/kg', to - from")
    temperature_diff: Optional[float] = Field(None, description="°C, to - from")

    mass_flow: Optional[float] = Field(None, description="Dry-air mass flow, kg/h")
    airflow: Optional[float] = Field(None, description="m³/h")
    water_flow_rate: Optional[float] = Field(None, description="Coil water flow, L/min")
    shf: Optional[float] = None


class Process(BaseModel):
    """A transformation from one state point to another."""

    id: str
    name: str = ""
    type: ProcessType
    season: Season = Season.BOTH
    order: int = 0
    from_point_id: str
    to_point_id: str
    parameters: ProcessParameters = Field(default_factory=ProcessParameters)
    results: Optional[ProcessResults] = None


class ProcessOutcome(BaseModel):
    """What apply_process hands back: the produced point and its bookkeeping."""

    to_point: StatePoint
    results: ProcessResults
    warnings: list[str] = Field(default_factory=list)
    exhaust_outlet: Optional[StatePoint] = None


class ProcessRequest(BaseModel):
    """Input model for applying one process over HTTP."""

    process: Process
    points: list[StatePoint]
    to_point: Optional[StatePoint] = None
    pressure: Optional[float] = Field(None, gt=0, description="kPa; standard pressure when omitted")
    constants: Optional[dict] = Field(None, description="Overrides of the default constants")
