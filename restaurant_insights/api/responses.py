"""Shared failure envelope for the API routers."""

import logging

from fastapi.responses import JSONResponse

from restaurant_insights.core.errors import InsightsError
from restaurant_insights.models.sentiment import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(exc: Exception) -> JSONResponse:
    """
    Translate an exception into {"success": false, "error": ...}.

    InsightsError subclasses carry their own status code; anything else
    is an unexpected failure and returns 500.
    """
    if isinstance(exc, InsightsError):
        status_code = exc.status_code
        message = str(exc) or exc.__class__.__name__
    else:
        status_code = 500
        message = str(exc) or "Internal server error"

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )
