"""
Pydantic models for running a whole air-handling sequence.
"""

from typing import Optional

from pydantic import BaseModel, Field

from psychrochain.config import Season
from psychrochain.models.process import Process
from psychrochain.models.state_point import StatePoint


class ChainInput(BaseModel):
    points: list[StatePoint]
    processes: list[Process]
    season: Optional[Season] = None
    pressure: Optional[float] = Field(None, gt=0, description="kPa; standard pressure when omitted")
    constants: Optional[dict] = Field(None, description="Overrides of the default constants")


class ChainResult(BaseModel):
    """Points and processes after a run, with per-process failures by id."""

    points: list[StatePoint]
    processes: list[Process]
    warnings: list[str] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)
