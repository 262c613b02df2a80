from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examflow import __version__
from examflow.api.cors import PermissiveCORSMiddleware
from examflow.api.errors import register_error_handlers
from examflow.api.v2.router import router as v2_router
from examflow.core.config import get_settings
from examflow.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(PermissiveCORSMiddleware, origins=settings.cors_origins)

register_error_handlers(app)
app.include_router(v2_router)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    return {"ok": "true"}
