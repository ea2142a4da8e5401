"""
PsychroChain FastAPI application entry point.

Serves the calculation endpoints under /api/v1 and a /health check.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from psychrochain.api.router import router
from psychrochain.config import CORS_ORIGINS, SERVICE_NAME, SERVICE_VERSION

app = FastAPI(
    title="PsychroChain API",
    description="Psychrometric state points, air-handling process chains and airflow balance",
    version=SERVICE_VERSION,
)

# The chart front end runs on its own dev server; set PSYCHROCHAIN_CORS_ORIGINS to change
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}
