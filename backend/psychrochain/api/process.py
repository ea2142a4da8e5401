"""
API routes for process calculations.
"""

from fastapi import APIRouter, HTTPException

from psychrochain.api.deps import calculation_context, unprocessable
from psychrochain.engine.chain import run_process_chain
from psychrochain.engine.process_engine import apply_process
from psychrochain.models.chain import ChainInput, ChainResult
from psychrochain.models.process import ProcessOutcome, ProcessRequest

router = APIRouter(prefix="/api/v1", tags=["process"])


@router.post("/process", response_model=ProcessOutcome)
async def calculate_process(data: ProcessRequest) -> ProcessOutcome:
    """
    Apply one process to the given state points.

    The process's upstream points must be resolved. Returns the produced
    state point, the process results and any warnings.
    """
    try:
        constants, pressure = calculation_context(data.constants, data.pressure)
        return apply_process(data.process, data.points, constants, pressure, data.to_point)
    except ValueError as e:
        raise unprocessable(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.post("/process-chain", response_model=ChainResult)
async def calculate_process_chain(data: ChainInput) -> ChainResult:
    """
    Resolve the input points and run every process in order.

    Failing processes are reported in `failures` rather than aborting the run.
    """
    try:
        constants, pressure = calculation_context(data.constants, data.pressure)
        return run_process_chain(data.points, data.processes, constants, pressure, data.season)
    except ValueError as e:
        raise unprocessable(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
