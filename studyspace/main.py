import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from studyspace.core.config import settings
from studyspace.core.database import Base, SessionLocal, engine
from studyspace.core.logger import setup_logging
import studyspace.models  # noqa: F401
from studyspace.seed import seed_defaults
from studyspace.services.errors import ServiceError

from studyspace.api.routes.auth import router as auth_router
from studyspace.api.routes.academic_groups import router as academic_groups_router
from studyspace.api.routes.applications import router as applications_router
from studyspace.api.routes.groups import router as groups_router
from studyspace.api.routes.subjects import router as subjects_router
from studyspace.api.routes.tasks import router as tasks_router
from studyspace.api.routes.memberships import users_router, moders_router
from studyspace.realtime.sse import router as sse_router

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = logging.getLogger("studyspace.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.SEED_DATA:
        db = SessionLocal()
        try:
            seed_defaults(db)
        finally:
            db.close()
    logger.info("Application started", extra={"dev": settings.DEV})
    yield


app = FastAPI(title="Studyspace API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # el detalle del driver va al log, nunca al cliente
    logger.error(
        "Database error",
        extra={"path": request.url.path, "method": request.method, "error": str(exc)},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth_router)
app.include_router(academic_groups_router)

# applications ANTES que /api/groups/{group_id}
app.include_router(applications_router)
app.include_router(groups_router)

app.include_router(subjects_router)
app.include_router(tasks_router)
app.include_router(users_router)
app.include_router(moders_router)

app.include_router(sse_router)


@app.get("/")
def root():
    return {"status": "ok", "message": "Studyspace API running"}


@app.get("/health")
def health():
    return {"ok": True}
