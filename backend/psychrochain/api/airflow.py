"""
API routes for the airflow balance check.
"""

from fastapi import APIRouter, HTTPException

from psychrochain.api.deps import calculation_context, unprocessable
from psychrochain.engine.airflow import validate_airflow_balance
from psychrochain.models.airflow import AirflowBalance, AirflowBalanceInput

router = APIRouter(prefix="/api/v1", tags=["airflow"])


@router.post("/airflow-balance", response_model=AirflowBalance)
async def airflow_balance(data: AirflowBalanceInput) -> AirflowBalance:
    """
    Check supply against return and exhaust, intake against exhaust, and any
    stream mass flows against their state points.
    """
    try:
        constants, pressure = calculation_context(data.constants, data.pressure)
        return validate_airflow_balance(
            data.streams,
            data.points,
            constants,
            pressure,
            threshold=data.threshold,
            season=data.season,
        )
    except ValueError as e:
        raise unprocessable(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
