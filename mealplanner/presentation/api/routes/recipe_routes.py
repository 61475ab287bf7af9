"""Recipe API Routes"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mealplanner.application.use_cases.recipe import (
    DeleteRecipeInput,
    DeleteRecipeUseCase,
    GenerateRecipeInput,
    GenerateRecipeUseCase,
    ListRecipesInput,
    ListRecipesUseCase,
    SaveRecipeInput,
    SaveRecipeUseCase,
)
from mealplanner.presentation.api.dependencies import ContainerDep, UserIdDep

router = APIRouter()


# === Request/Response Models ===


class GenerateRecipeRequest(BaseModel):
    """レシピ生成リクエスト"""

    ingredients: str = Field(description="使いたい食材 (カンマ区切り)")
    mealType: str | None = None
    servings: int | None = Field(default=None, ge=1)
    additionalNotes: str | None = None


class GenerateRecipeResponse(BaseModel):
    success: bool = True
    userId: str
    generatedAt: str
    recipe: dict[str, Any] | None = None
    rawResponse: str | None = None
    warning: str | None = None


class SaveRecipeRequest(BaseModel):
    """レシピ保存リクエスト"""

    recipe: dict[str, Any]
    recipeType: str = "general"


class RecipeResponse(BaseModel):
    success: bool = True
    recipe: dict[str, Any]


class RecipeListResponse(BaseModel):
    success: bool = True
    recipes: list[dict[str, Any]]
    count: int


# === Routes ===


@router.post("/generate", response_model=GenerateRecipeResponse, response_model_exclude_none=True)
async def generate_recipe(
    body: GenerateRecipeRequest,
    user_id: UserIdDep,
    container: ContainerDep,
) -> GenerateRecipeResponse:
    """食材からレシピを生成"""
    use_case = GenerateRecipeUseCase(
        user_repository=container.user_repository,
        language_model=container.language_model,
        inference_config=container.recipe_inference,
    )
    result = await use_case.execute(
        GenerateRecipeInput(
            user_id=user_id,
            ingredients=body.ingredients,
            meal_type=body.mealType,
            servings=body.servings,
            additional_notes=body.additionalNotes,
        )
    )
    return GenerateRecipeResponse(
        userId=result.user_id,
        generatedAt=result.generated_at,
        recipe=result.recipe,
        rawResponse=result.raw_response,
        warning=result.warning,
    )


@router.post("", response_model=RecipeResponse, status_code=201)
async def save_recipe(
    body: SaveRecipeRequest,
    user_id: UserIdDep,
    container: ContainerDep,
) -> RecipeResponse:
    """レシピを保存"""
    use_case = SaveRecipeUseCase(
        recipe_repository=container.recipe_repository,
        user_repository=container.user_repository,
    )
    result = await use_case.execute(
        SaveRecipeInput(user_id=user_id, recipe=body.recipe, recipe_type=body.recipeType)
    )
    return RecipeResponse(recipe=result.recipe)


@router.get("", response_model=RecipeListResponse)
async def list_recipes(user_id: UserIdDep, container: ContainerDep) -> RecipeListResponse:
    """自分のレシピ一覧"""
    use_case = ListRecipesUseCase(recipe_repository=container.recipe_repository)
    result = await use_case.execute(ListRecipesInput(user_id=user_id))
    return RecipeListResponse(recipes=result.recipes, count=len(result.recipes))


@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, user_id: UserIdDep, container: ContainerDep) -> dict:
    """レシピを削除"""
    use_case = DeleteRecipeUseCase(recipe_repository=container.recipe_repository)
    await use_case.execute(DeleteRecipeInput(user_id=user_id, recipe_id=recipe_id))
    return {"success": True, "message": "Recipe deleted successfully"}
