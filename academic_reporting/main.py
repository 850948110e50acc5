import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from academic_reporting.api.attendance.router import router as attendance_router
from academic_reporting.api.auth.router import router as auth_router
from academic_reporting.api.class_courses.router import router as class_courses_router
from academic_reporting.api.classes.router import router as classes_router
from academic_reporting.api.courses.router import router as courses_router
from academic_reporting.api.enrollments.router import router as enrollments_router
from academic_reporting.api.faculties.router import router as faculties_router
from academic_reporting.api.lecturer_classes.router import router as lecturer_classes_router
from academic_reporting.api.lecturer_courses.router import router as lecturer_courses_router
from academic_reporting.api.lecturer_prl.router import router as lecturer_prl_router
from academic_reporting.api.prl.router import router as prl_router
from academic_reporting.api.ratings.router import router as ratings_router
from academic_reporting.api.reports.router import router as reports_router
from academic_reporting.api.summary_reports.router import router as summary_reports_router
from academic_reporting.api.users.router import router as users_router
from academic_reporting.api.venues.router import router as venues_router
from academic_reporting.core.audit import log_action
from academic_reporting.core.config import settings
from academic_reporting.core.exceptions import ServiceError
from academic_reporting.core.logging_config import logger
from academic_reporting.core.middleware import RequestLoggingMiddleware
from academic_reporting.db.session import engine, get_db, init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting academic reporting backend")
    if settings.create_tables_on_startup:
        await init_db()
        logger.info("Database tables ensured")
    yield
    await engine.dispose()
    logger.info("Academic reporting backend stopped")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        content = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        offending = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}={error.get('input')!r}"
            for error in exc.errors()
        )
        # The caller is not resolved yet when payload parsing fails
        provider = request.app.dependency_overrides.get(get_db, get_db)
        async for db in provider():
            await log_action(
                db, None, "Invalid Request Payload", f"{request.method} {request.url.path}: {offending}"
            )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request payload", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app() -> FastAPI:
    app = FastAPI(title="Academic Reporting Backend", lifespan=lifespan)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # Routers
    app.include_router(auth_router)
    app.include_router(venues_router)
    app.include_router(faculties_router)
    app.include_router(courses_router)
    app.include_router(classes_router)
    app.include_router(class_courses_router)
    app.include_router(users_router)
    app.include_router(lecturer_courses_router)
    app.include_router(lecturer_classes_router)
    app.include_router(lecturer_prl_router)
    app.include_router(prl_router)
    app.include_router(reports_router)
    app.include_router(summary_reports_router)
    app.include_router(attendance_router)
    app.include_router(ratings_router)
    app.include_router(enrollments_router)

    # Generated summary workbooks
    os.makedirs(settings.reports_dir, exist_ok=True)
    app.mount("/reports", StaticFiles(directory=settings.reports_dir, check_dir=False), name="reports")

    return app


app = create_app()
