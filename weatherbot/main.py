import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherbot.api.routes import api_router
from weatherbot.core.config import settings


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title=settings.app_name)
    # allow_credentials cannot be combined with a wildcard origin
    cors_origins = settings.cors_origins
    allow_creds = cors_origins != "*"
    if cors_origins == "*":
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_creds,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


app = create_app()
