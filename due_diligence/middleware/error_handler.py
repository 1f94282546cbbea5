"""
Global error handling middleware.
"""
import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable

from due_diligence.infrastructure.external_api_client import ExternalAPIError


logger = logging.getLogger(__name__)

MISSING_BODY_MESSAGE = "Latitude is required"


def validation_error_message(exc: RequestValidationError) -> str:
    """
    Extract a single user-facing message from a request validation error.

    Args:
        exc: The validation error raised by FastAPI

    Returns:
        The first error's message
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    # No body at all: report the first coordinate as missing
    if first.get("type") == "missing" and tuple(first.get("loc", ())) == ("body",):
        return MISSING_BODY_MESSAGE

    ctx = first.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])

    message = str(first.get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report invalid request bodies as 400 with an ``error`` string.
    """
    message = validation_error_message(exc)
    logger.warning(
        f"Validation error: {message}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """
        Process the request and handle any exceptions.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response object
        """
        try:
            response = await call_next(request)
            return response

        except ExternalAPIError as e:
            # Log external API errors
            logger.error(
                f"External API error: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": e.status_code,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "error": "External API error",
                    "detail": e.message,
                }
            )

        except ValueError as e:
            # Log validation errors
            logger.warning(
                f"Validation error: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "error": str(e),
                    "detail": "Invalid request",
                }
            )

        except Exception as e:
            # Log unexpected errors
            logger.exception(
                f"Unhandled exception: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal server error",
                    "detail": "An unexpected error occurred",
                }
            )
