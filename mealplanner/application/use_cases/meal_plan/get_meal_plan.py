"""Get / List Meal Plan Use Cases"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from mealplanner.application.ports.repositories import IMealPlanRepository, IRecipeRepository
from mealplanner.domain.meal_plan import MealPlan

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PlanNotFoundError(Exception):
    """献立が見つからないエラー"""

    pass


class PlanAccessDeniedError(Exception):
    """他ユーザーの献立へのアクセスエラー"""

    pass


@dataclass
class GetMealPlanInput:
    """取得入力DTO"""

    user_id: str
    plan_id: str


@dataclass
class GetMealPlanOutput:
    """取得出力DTO"""

    plan: dict[str, Any]


@dataclass
class ListMealPlansInput:
    """一覧入力DTO"""

    user_id: str
    limit: int = DEFAULT_PAGE_SIZE
    cursor: str | None = None


@dataclass
class ListMealPlansOutput:
    """一覧出力DTO"""

    plans: list[dict[str, Any]] = field(default_factory=list)
    next_cursor: str | None = None


@dataclass
class ListPlanRecipesOutput:
    """献立レシピ一覧出力DTO"""

    plan_id: str
    recipes: list[dict[str, Any]] = field(default_factory=list)


async def _load_owned_plan(
    repo: IMealPlanRepository,
    plan_id: str,
    user_id: str,
) -> MealPlan:
    """献立を取得し、所有者を検証"""
    plan = await repo.find_by_id(plan_id)
    if plan is None:
        logger.warning("plan_not_found", plan_id=plan_id)
        raise PlanNotFoundError(f"Plan {plan_id} not found")
    if plan.user_id != user_id:
        logger.warning("plan_access_denied", plan_id=plan_id, user_id=user_id)
        raise PlanAccessDeniedError(f"Plan {plan_id} belongs to another user")
    return plan


class GetMealPlanUseCase:
    """
    献立取得 ユースケース

    status を含む献立をそのまま返す。クライアントはこれをポーリングして
    生成完了を待つ。
    """

    def __init__(self, meal_plan_repository: IMealPlanRepository):
        self._plan_repo = meal_plan_repository

    async def execute(self, input_data: GetMealPlanInput) -> GetMealPlanOutput:
        """ユースケースを実行"""
        plan = await _load_owned_plan(self._plan_repo, input_data.plan_id, input_data.user_id)
        logger.info("get_meal_plan_completed", plan_id=plan.plan_id, status=plan.status.value)
        return GetMealPlanOutput(plan=plan.to_dict())


class ListMealPlansUseCase:
    """献立一覧 ユースケース (新しい順)"""

    def __init__(self, meal_plan_repository: IMealPlanRepository):
        self._plan_repo = meal_plan_repository

    async def execute(self, input_data: ListMealPlansInput) -> ListMealPlansOutput:
        """ユースケースを実行"""
        if input_data.limit < 1:
            raise ValueError("limit must be positive")
        limit = min(input_data.limit, MAX_PAGE_SIZE)

        plans, next_cursor = await self._plan_repo.find_by_user(
            user_id=input_data.user_id,
            limit=limit,
            cursor=input_data.cursor,
        )
        logger.info("list_meal_plans_completed", user_id=input_data.user_id, count=len(plans))

        return ListMealPlansOutput(
            plans=[p.to_dict() for p in plans],
            next_cursor=next_cursor,
        )


class ListPlanRecipesUseCase:
    """献立に含まれるレシピ一覧 ユースケース"""

    def __init__(
        self,
        meal_plan_repository: IMealPlanRepository,
        recipe_repository: IRecipeRepository,
    ):
        self._plan_repo = meal_plan_repository
        self._recipe_repo = recipe_repository

    async def execute(self, input_data: GetMealPlanInput) -> ListPlanRecipesOutput:
        """ユースケースを実行"""
        plan = await _load_owned_plan(self._plan_repo, input_data.plan_id, input_data.user_id)
        recipes = await self._recipe_repo.find_by_plan(plan.plan_id)
        recipes.sort(key=lambda r: (r.day or 0, r.meal_type or ""))

        return ListPlanRecipesOutput(
            plan_id=plan.plan_id,
            recipes=[r.to_dict() for r in recipes],
        )
