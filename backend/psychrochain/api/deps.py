"""
Helpers shared by the API routes.
"""

from typing import Optional

from fastapi import HTTPException

from psychrochain.errors import PsychroError
from psychrochain.models.constants import PsychrometricConstants, load_constants


def calculation_context(
    overrides: Optional[dict], pressure: Optional[float]
) -> tuple[PsychrometricConstants, float]:
    """Constants for one request and the pressure to use with them."""
    constants = load_constants(overrides)
    return constants, pressure if pressure is not None else constants.standard_pressure


def unprocessable(e: ValueError) -> HTTPException:
    if isinstance(e, PsychroError):
        detail = e.to_dict()
    else:
        detail = {"kind": type(e).__name__, "message": str(e)}
    return HTTPException(status_code=422, detail=detail)
