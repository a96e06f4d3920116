from logging import getLogger
from typing import Callable

import orjson
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request

from orcid_login.settings import env_settings

logger = getLogger(__name__)
crashes_logger = getLogger("crashes")


def add_middlewares(app: FastAPI):
    settings = env_settings()

    @app.middleware("http")
    async def crash_log_middleware(request: Request, call_next: Callable):
        try:
            return await call_next(request)
        except Exception:
            crash_infos = {"url": str(request.url), "method": request.method}
            crashes_logger.exception(orjson.dumps(crash_infos).decode())
            raise

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(settings.HOST).rstrip("/")]
        + [o for o in settings.CORS_OTHER_ORIGINS.split(" ") if o],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # authlib keeps the oauth state in the session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET.get_secret_value(),
        https_only=not settings.is_dev(),
    )
