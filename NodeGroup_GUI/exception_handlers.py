"""Convert every error into a ``{success: false, message}`` JSON response."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from NodeGroup_GUI.exceptions import InfrastructureError, NodeGroupError
from NodeGroup_GUI.logger import logger
from NodeGroup_GUI.schemas import ErrorResponse

OPERATION_FAILED_PREFIX = "operation failed: "


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NodeGroupError)
    async def node_group_exception_handler(request: Request, exc: NodeGroupError):
        if isinstance(exc, InfrastructureError) or exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return error_response(
                exc.status_code, f"{OPERATION_FAILED_PREFIX}{exc.message}"
            )
        logger.warning(
            f"{request.method} {request.url.path} rejected "
            f"({exc.status_code}): {exc.message}"
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.warning(f"Request validation error: {exc.errors()}")
        return error_response(400, "invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP exception: {exc.status_code} {exc.detail}")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return error_response(500, f"{OPERATION_FAILED_PREFIX}{exc}")
