"""
Top-level API router that aggregates all sub-routers.
"""

from fastapi import APIRouter

from psychrochain.api.state_point import router as state_point_router
from psychrochain.api.process import router as process_router
from psychrochain.api.airflow import router as airflow_router

router = APIRouter()
router.include_router(state_point_router)
router.include_router(process_router)
router.include_router(airflow_router)
