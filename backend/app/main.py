# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import AppError
from app.core.security import check_signing_key
from app.core.bootstrap import ensure_default_admin

from app.api.routers import auth, tasks, admin

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render every application error as `{"message": ...}` with its status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


@app.on_event("startup")
async def on_startup():
    # A missing or short signing key is a deployment error: refuse to start
    check_signing_key()
    await init_db(generate_schemas=settings.generate_schemas)
    await ensure_default_admin()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(auth.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(tasks.router)


@app.get("/healthz")
def healthz():
    return {"ok": True}
