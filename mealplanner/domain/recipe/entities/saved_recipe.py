"""SavedRecipe Entity"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from ..value_objects.recipe_details import RecipeDetails

if TYPE_CHECKING:
    from mealplanner.domain.meal_plan.value_objects import PlannedMeal


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def recipe_id_for(plan_id: str, day: int, meal_type: str, ordinal: int = 1) -> str:
    """献立由来のレシピIDを生成 (再配信時に上書きされるよう決定的)

    同じ日に同じ食事区分が複数ある場合は 2 番目以降に連番を付ける。
    """
    base = f"recipe-{plan_id}-day{day}-{meal_type}"
    return base if ordinal <= 1 else f"{base}-{ordinal}"


@dataclass
class SavedRecipe:
    """
    保存済みレシピ（エンティティ）

    ユーザーが手動保存したレシピと、献立生成で作られたレシピの両方を表す。
    """

    user_id: str
    recipe_id: str
    details: RecipeDetails
    recipe_type: str = "general"
    plan_id: str | None = None
    day: int | None = None
    date: str | None = None
    meal_type: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(
        cls,
        user_id: str,
        details: RecipeDetails,
        recipe_type: str = "general",
    ) -> SavedRecipe:
        """手動保存レシピを作成"""
        return cls(
            user_id=user_id,
            recipe_id=str(uuid4()),
            details=details,
            recipe_type=recipe_type or "general",
        )

    @classmethod
    def from_planned_meal(
        cls,
        plan_id: str,
        user_id: str,
        day: int,
        meal: PlannedMeal,
        date: str | None = None,
        ordinal: int = 1,
    ) -> SavedRecipe:
        """献立の1食分からレシピを作成"""
        return cls(
            user_id=user_id,
            recipe_id=recipe_id_for(plan_id, day, meal.meal_type, ordinal),
            details=meal.recipe,
            recipe_type=meal.meal_type,
            plan_id=plan_id,
            day=day,
            date=date,
            meal_type=meal.meal_type,
        )

    @property
    def is_from_plan(self) -> bool:
        return self.plan_id is not None

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        data: dict[str, Any] = {
            "userId": self.user_id,
            "recipeId": self.recipe_id,
            "recipeType": self.recipe_type,
            "recipe": self.details.to_dict(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.plan_id is not None:
            data["planId"] = self.plan_id
            data["day"] = self.day
            data["mealType"] = self.meal_type
            if self.date:
                data["date"] = self.date
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedRecipe:
        """辞書から生成"""
        return cls(
            user_id=data["userId"],
            recipe_id=data["recipeId"],
            details=RecipeDetails.from_dict(data["recipe"]),
            recipe_type=data.get("recipeType", "general"),
            plan_id=data.get("planId"),
            day=int(data["day"]) if data.get("day") is not None else None,
            date=data.get("date"),
            meal_type=data.get("mealType"),
            created_at=datetime.fromisoformat(data["createdAt"])
            if "createdAt" in data
            else _utc_now(),
            updated_at=datetime.fromisoformat(data["updatedAt"])
            if "updatedAt" in data
            else _utc_now(),
        )
