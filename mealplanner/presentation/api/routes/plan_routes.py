"""Meal Plan API Routes"""
from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from mealplanner.application.use_cases.meal_plan import (
    GetMealPlanInput,
    GetMealPlanUseCase,
    ListMealPlansInput,
    ListMealPlansUseCase,
    ListPlanRecipesUseCase,
    RequestMealPlanInput,
    RequestMealPlanUseCase,
)
from mealplanner.domain.meal_plan import PlanRequest
from mealplanner.presentation.api.dependencies import ContainerDep, UserIdDep

router = APIRouter()


# === Request/Response Models ===


class GeneratePlanRequest(BaseModel):
    """献立生成リクエスト"""

    planType: str = Field(default="weekly", description="プラン種別")
    dietaryGoal: str | None = Field(default=None, description="食事目標 (例: high-protein)")
    startDate: str | None = Field(default=None, description="開始日 (YYYY-MM-DD)")
    duration: int | None = Field(default=None, description="日数")
    mealsPerDay: int | None = Field(default=None, description="1日の食事数")
    additionalRequirements: str | None = Field(default=None, description="追加要望")


class GeneratePlanResponse(BaseModel):
    """献立生成レスポンス"""

    success: bool = True
    planId: str
    status: str
    message: str


class PlanResponse(BaseModel):
    success: bool = True
    plan: dict[str, Any]


class PlanListResponse(BaseModel):
    success: bool = True
    plans: list[dict[str, Any]]
    nextCursor: str | None = None


class PlanRecipesResponse(BaseModel):
    success: bool = True
    planId: str
    recipes: list[dict[str, Any]]


# === Routes ===


@router.post("/generate", response_model=GeneratePlanResponse, status_code=202)
async def generate_plan(
    body: GeneratePlanRequest,
    user_id: UserIdDep,
    container: ContainerDep,
) -> GeneratePlanResponse:
    """献立生成をリクエスト (生成は worker で非同期に行う)"""
    use_case = RequestMealPlanUseCase(
        meal_plan_repository=container.meal_plan_repository,
        event_publisher=container.event_publisher,
    )
    request = PlanRequest.from_dict(body.model_dump(exclude_none=True))
    result = await use_case.execute(RequestMealPlanInput(user_id=user_id, request=request))

    return GeneratePlanResponse(
        planId=result.plan_id,
        status=result.status,
        message="Meal plan generation has been initiated. Check back shortly for results.",
    )


@router.get("", response_model=PlanListResponse)
async def list_plans(
    user_id: UserIdDep,
    container: ContainerDep,
    limit: Annotated[int, Query(ge=1)] = 20,
    cursor: Annotated[str | None, Query()] = None,
) -> PlanListResponse:
    """献立一覧 (新しい順)"""
    use_case = ListMealPlansUseCase(meal_plan_repository=container.meal_plan_repository)
    result = await use_case.execute(
        ListMealPlansInput(user_id=user_id, limit=limit, cursor=cursor)
    )
    return PlanListResponse(plans=result.plans, nextCursor=result.next_cursor)


@router.get("/{plan_id}", response_model=PlanResponse)
async def get_plan(plan_id: str, user_id: UserIdDep, container: ContainerDep) -> PlanResponse:
    """献立を取得"""
    use_case = GetMealPlanUseCase(meal_plan_repository=container.meal_plan_repository)
    result = await use_case.execute(GetMealPlanInput(user_id=user_id, plan_id=plan_id))
    return PlanResponse(plan=result.plan)


@router.get("/{plan_id}/recipes", response_model=PlanRecipesResponse)
async def list_plan_recipes(
    plan_id: str,
    user_id: UserIdDep,
    container: ContainerDep,
) -> PlanRecipesResponse:
    """献立のレシピ一覧"""
    use_case = ListPlanRecipesUseCase(
        meal_plan_repository=container.meal_plan_repository,
        recipe_repository=container.recipe_repository,
    )
    result = await use_case.execute(GetMealPlanInput(user_id=user_id, plan_id=plan_id))
    return PlanRecipesResponse(planId=result.plan_id, recipes=result.recipes)
