# ───────────────────────────────────────────────────────────────
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ─── Local imports ─────────────────────────────────────────────
from src.classwork.config.settings import Settings
from src.classwork.context import ClassworkContext
from src.classwork.exceptions import ClassworkError, Conflict, NotFound, Unavailable, ValidationFailed
from src.classwork.routers import admin_quiz_router, assignment_router, stream_router, student_quiz_router
from src.classwork.utils.time import utc_now

_STATUS_BY_ERROR = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (Unavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ValidationFailed, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


async def classwork_error_handler(request: Request, exc: ClassworkError):
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logging.warning(f"{request.method} {request.url.path} rejected: {exc.detail}")
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


def create_app(context: Optional[ClassworkContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    context = context or ClassworkContext.from_settings(settings)

    # ─── FastAPI app ───────────────────────────────────────────
    app = FastAPI(
        title="Classwork API",
        description="Quizzes, assignments, materials and submissions for classes",
        version="1.0.0",
    )
    app.state.context = context

    # ─── Middlewares ───────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ClassworkError, classwork_error_handler)

    # ─── Lifecycle ─────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        context.startup()

    @app.on_event("shutdown")
    def on_shutdown():
        context.shutdown()

    # ─── Routers ───────────────────────────────────────────────
    app.include_router(admin_quiz_router.quiz_router, prefix="/api/admin/quizzes")
    app.include_router(admin_quiz_router.submission_router, prefix="/api/admin/quiz-submissions")
    app.include_router(student_quiz_router.router, prefix="/api/student")
    app.include_router(assignment_router.router, prefix="/api/assignments")
    app.include_router(stream_router.router, prefix="/api/stream")

    # ─── Simple endpoints ──────────────────────────────────────
    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the Classwork API",
            "docs_url": "/docs",
            "redoc_url": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok" if context.backend.is_ready else "starting",
            "backend": context.backend.name,
            "timestamp": utc_now().isoformat(),
        }

    return app


app = create_app()
