"""
Notes API: Health Check Route
==============================

What:  Liveness probe reporting whether the database answers.
How:   Runs SELECT 1 through ping_database().
Who:   Called by Docker health checks, load balancers and the client.

Responses:
    200 {"data": {"db": "ok"}, "message": null, "errors": null}
    500 {"data": {"db": "error"}, "message": "Database connection failed",
         "errors": {"database": ["Connection failed"]}}
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from notes_api.config import settings
from notes_api.database import ping_database
from notes_api.schemas.note import HealthData, HealthEnvelope

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthEnvelope,
    responses={500: {"description": "Database unreachable", "model": HealthEnvelope}},
    summary="Service health check",
)
async def health_check():
    try:
        await ping_database()
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        detail = "Connection failed"
        if settings.debug:
            detail = f"Connection failed: {e}"
        body = HealthEnvelope(
            data=HealthData(db="error"),
            message="Database connection failed",
            errors={"database": [detail]},
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    return HealthEnvelope(data=HealthData(db="ok"))
