"""FastAPI Application Entry Point (ローカル開発用)"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mealplanner.infrastructure.config import get_settings
from mealplanner.infrastructure.logging_config import configure_logging
from mealplanner.presentation.api.routes import (
    health_routes,
    plan_routes,
    recipe_routes,
    user_routes,
)
from mealplanner.presentation.middleware.error_handler import error_handlers
from mealplanner.presentation.middleware.logging import LoggingMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """アプリケーションのライフサイクル管理"""
    settings = get_settings()
    logger.info(
        "application_starting",
        service=settings.service_name,
        environment=settings.environment,
    )
    yield
    logger.info("application_shutting_down")


def create_app() -> FastAPI:
    """FastAPI アプリケーションを作成"""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Meal Planner API",
        description="Personalised recipes and meal plans powered by Amazon Bedrock",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    # Error Handlers
    for exception_class, handler in error_handlers.items():
        app.add_exception_handler(exception_class, handler)

    # Routes
    app.include_router(health_routes.router, tags=["Health"])
    app.include_router(plan_routes.router, prefix="/api/v1/plans", tags=["Plans"])
    app.include_router(recipe_routes.router, prefix="/api/v1/recipes", tags=["Recipes"])
    app.include_router(user_routes.router, prefix="/api/v1/users", tags=["Users"])

    return app


app = create_app()
