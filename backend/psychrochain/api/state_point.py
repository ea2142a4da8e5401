"""
API routes for state point resolution and constants.
"""

from fastapi import APIRouter, HTTPException

from psychrochain.api.deps import calculation_context, unprocessable
from psychrochain.engine.properties import pressure_from_altitude
from psychrochain.engine.state_resolver import resolve_state_point
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.state_point import StatePointRequest, StatePointResolution

router = APIRouter(prefix="/api/v1", tags=["state-point"])


@router.post("/state-point", response_model=StatePointResolution)
async def create_state_point(data: StatePointRequest) -> StatePointResolution:
    """
    Resolve a full psychrometric state point from two independent properties.

    Accepts any supported input pair (dry bulb with RH, wet bulb, humidity
    ratio or enthalpy) and returns all psychrometric properties.
    """
    try:
        constants, pressure = calculation_context(data.constants, data.pressure)
        return resolve_state_point(data.point, constants, pressure, data.include_wet_bulb)
    except ValueError as e:
        raise unprocessable(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.get("/pressure-from-altitude")
async def get_pressure_from_altitude(altitude: float) -> dict:
    """
    Convert a site altitude in metres to standard atmospheric pressure in kPa.
    """
    try:
        pressure = pressure_from_altitude(altitude)
        return {"altitude": altitude, "pressure": round(pressure, 6)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.get("/constants/default", response_model=PsychrometricConstants)
async def default_constants() -> PsychrometricConstants:
    return PsychrometricConstants()
