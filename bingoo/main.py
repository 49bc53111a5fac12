import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from bingoo import containers
from bingoo.config import settings
from bingoo.core.exception_handlers import register_exception_handlers
from bingoo.core.logging_middleware import LoggingMiddleware
from bingoo.logging_config import setup_logging
from bingoo.routers import (
    admin_router,
    game_router,
    health_router,
    payment_router,
    point_router,
    prize_router,
    region_router,
    tournament_router,
    transaction_router,
    user_router,
)

load_dotenv("bingoo/.env")

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(
        log_level=settings.LOG_LEVEL,
        json_logs=settings.JSON_LOGS,
        log_file=settings.LOG_FILE,
    )

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (
        health_router,
        user_router,
        region_router,
        prize_router,
        game_router,
        tournament_router,
        payment_router,
        transaction_router,
        point_router,
        admin_router,
    ):
        app.include_router(module.router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
