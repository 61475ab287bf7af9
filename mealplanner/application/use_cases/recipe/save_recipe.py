"""Save / List / Delete Recipe Use Cases"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from mealplanner.application.ports.repositories import IRecipeRepository, IUserRepository
from mealplanner.application.use_cases.user.get_user import UserNotFoundError
from mealplanner.domain.recipe import RecipeDetails, SavedRecipe

logger = structlog.get_logger()


class RecipeNotFoundError(Exception):
    """レシピが見つからないエラー"""

    pass


@dataclass
class SaveRecipeInput:
    """保存入力DTO"""

    user_id: str
    recipe: dict[str, Any]
    recipe_type: str = "general"


@dataclass
class SaveRecipeOutput:
    """保存出力DTO"""

    recipe_id: str
    recipe: dict[str, Any]


@dataclass
class ListRecipesInput:
    """一覧入力DTO"""

    user_id: str
    limit: int = 100


@dataclass
class ListRecipesOutput:
    """一覧出力DTO"""

    recipes: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class DeleteRecipeInput:
    """削除入力DTO"""

    user_id: str
    recipe_id: str


class SaveRecipeUseCase:
    """レシピ保存 ユースケース"""

    def __init__(
        self,
        recipe_repository: IRecipeRepository,
        user_repository: IUserRepository,
    ):
        self._recipe_repo = recipe_repository
        self._user_repo = user_repository

    async def execute(self, input_data: SaveRecipeInput) -> SaveRecipeOutput:
        """ユースケースを実行"""
        if not input_data.user_id:
            raise ValueError("userId is required")

        details = RecipeDetails.from_dict(input_data.recipe)
        if not details.ingredients:
            raise ValueError("At least one ingredient is required")

        user = await self._user_repo.find_by_id(input_data.user_id)
        if user is None:
            raise UserNotFoundError(f"User {input_data.user_id} not found")

        saved = SavedRecipe.create(
            user_id=input_data.user_id,
            details=details,
            recipe_type=input_data.recipe_type,
        )
        await self._recipe_repo.save(saved)

        logger.info("recipe_saved", user_id=saved.user_id, recipe_id=saved.recipe_id)
        return SaveRecipeOutput(recipe_id=saved.recipe_id, recipe=saved.to_dict())


class ListRecipesUseCase:
    """レシピ一覧 ユースケース (新しい順)"""

    def __init__(self, recipe_repository: IRecipeRepository):
        self._recipe_repo = recipe_repository

    async def execute(self, input_data: ListRecipesInput) -> ListRecipesOutput:
        """ユースケースを実行"""
        recipes = await self._recipe_repo.find_by_user(input_data.user_id, limit=input_data.limit)
        recipes.sort(key=lambda r: r.created_at, reverse=True)
        return ListRecipesOutput(recipes=[r.to_dict() for r in recipes])


class DeleteRecipeUseCase:
    """レシピ削除 ユースケース"""

    def __init__(self, recipe_repository: IRecipeRepository):
        self._recipe_repo = recipe_repository

    async def execute(self, input_data: DeleteRecipeInput) -> None:
        """ユースケースを実行"""
        deleted = await self._recipe_repo.delete(input_data.user_id, input_data.recipe_id)
        if not deleted:
            raise RecipeNotFoundError(f"Recipe {input_data.recipe_id} not found")
        logger.info(
            "recipe_deleted",
            user_id=input_data.user_id,
            recipe_id=input_data.recipe_id,
        )
