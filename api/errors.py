import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from services.exceptions import CourseServiceError, InternalServiceError

logger = logging.getLogger(__name__)


async def course_error_handler(_request: Request, exc: CourseServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Driver and network failures (e.g. a refused connection) are not SQLAlchemyErrors
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalServiceError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CourseServiceError, course_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
