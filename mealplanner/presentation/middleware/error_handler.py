"""Error Handlers"""
from __future__ import annotations

from typing import Awaitable, Callable

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from mealplanner.application.ports.repositories import ConcurrencyError
from mealplanner.application.use_cases.meal_plan import PlanAccessDeniedError, PlanNotFoundError
from mealplanner.application.use_cases.recipe import RecipeNotFoundError
from mealplanner.application.use_cases.user import UserAlreadyExistsError, UserNotFoundError
from mealplanner.domain.meal_plan import InvalidStateError

logger = structlog.get_logger()

Handler = Callable[[Request, Exception], Awaitable[JSONResponse]]


def _error_handler(status_code: int, code: str) -> Handler:
    """例外を指定ステータスの JSON レスポンスに変換するハンドラを生成"""

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.warning(
            "request_failed",
            status_code=status_code,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "error": str(exc), "code": code},
        )

    return handler


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """汎用エラーハンドラ"""
    logger.error("unhandled_error", error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


# エラーハンドラのマッピング
error_handlers: dict[type[Exception], Handler] = {
    ValueError: _error_handler(400, "VALIDATION_ERROR"),
    PlanAccessDeniedError: _error_handler(403, "ACCESS_DENIED"),
    PlanNotFoundError: _error_handler(404, "PLAN_NOT_FOUND"),
    RecipeNotFoundError: _error_handler(404, "RECIPE_NOT_FOUND"),
    UserNotFoundError: _error_handler(404, "USER_NOT_FOUND"),
    UserAlreadyExistsError: _error_handler(409, "USER_ALREADY_EXISTS"),
    ConcurrencyError: _error_handler(409, "CONCURRENCY_CONFLICT"),
    InvalidStateError: _error_handler(409, "INVALID_STATE"),
    Exception: generic_error_handler,
}
