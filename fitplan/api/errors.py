"""Translate domain errors into JSON responses naming the failed stage."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from fitplan.recommendation.errors import FitPlanError

STAGE_STATUS: dict[str, int] = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "lookup": status.HTTP_404_NOT_FOUND,
    "selection": status.HTTP_404_NOT_FOUND,
    "persistence": status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def fitplan_error_handler(request: Request, exc: FitPlanError) -> JSONResponse:
    status_code = STAGE_STATUS.get(exc.stage, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"error": str(exc), "stage": exc.stage})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FitPlanError, fitplan_error_handler)
