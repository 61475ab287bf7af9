"""Repository Interfaces (Ports)"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mealplanner.domain.meal_plan import MealPlan, PlanStatus
    from mealplanner.domain.recipe import SavedRecipe
    from mealplanner.domain.user import UserProfile


class ConcurrencyError(Exception):
    """条件付き書き込みの競合エラー (保存済みの状態が想定と異なる)"""

    pass


class DuplicateItemError(Exception):
    """作成しようとしたアイテムが既に存在するエラー"""

    pass


class IUserRepository(ABC):
    """
    User Repository Interface

    ユーザープロフィールの永続化を抽象化する。
    """

    @abstractmethod
    async def find_by_id(self, user_id: str) -> UserProfile | None:
        """IDでユーザーを取得"""
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> UserProfile | None:
        """メールアドレスでユーザーを取得"""
        pass

    @abstractmethod
    async def save(self, user: UserProfile) -> None:
        """新規ユーザーを保存 (既存の場合は DuplicateItemError)"""
        pass

    @abstractmethod
    async def update(self, user: UserProfile) -> UserProfile:
        """プロフィールを更新して最新の状態を返す"""
        pass


class IMealPlanRepository(ABC):
    """
    Meal Plan Repository Interface

    献立の状態遷移は update_status の条件付き書き込みで行う。
    """

    @abstractmethod
    async def save(self, plan: MealPlan) -> None:
        """新規献立を保存 (既存の場合は DuplicateItemError)"""
        pass

    @abstractmethod
    async def find_by_id(self, plan_id: str) -> MealPlan | None:
        """IDで献立を取得"""
        pass

    @abstractmethod
    async def find_by_user(
        self,
        user_id: str,
        limit: int = 20,
        cursor: str | None = None,
    ) -> tuple[list[MealPlan], str | None]:
        """ユーザーの献立一覧を新しい順に取得（ページネーション対応）"""
        pass

    @abstractmethod
    async def update_status(self, plan: MealPlan, expected_status: PlanStatus) -> None:
        """
        献立の現在の状態を書き込む

        保存済みのステータスが expected_status と一致しない場合は ConcurrencyError。
        """
        pass


class IRecipeRepository(ABC):
    """
    Recipe Repository Interface

    保存済みレシピ（手動保存・献立由来）の永続化を抽象化する。
    """

    @abstractmethod
    async def save(self, recipe: SavedRecipe) -> None:
        """レシピを保存"""
        pass

    @abstractmethod
    async def save_batch(self, recipes: list[SavedRecipe]) -> None:
        """レシピをバッチ保存"""
        pass

    @abstractmethod
    async def find(self, user_id: str, recipe_id: str) -> SavedRecipe | None:
        """レシピを取得"""
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str, limit: int = 100) -> list[SavedRecipe]:
        """ユーザーのレシピ一覧を新しい順に取得"""
        pass

    @abstractmethod
    async def find_by_plan(self, plan_id: str) -> list[SavedRecipe]:
        """献立のレシピ一覧を日付順に取得"""
        pass

    @abstractmethod
    async def delete(self, user_id: str, recipe_id: str) -> bool:
        """レシピを削除"""
        pass
