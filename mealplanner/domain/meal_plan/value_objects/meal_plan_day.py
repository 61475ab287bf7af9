"""Meal Plan Day Value Objects"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mealplanner.domain.recipe.value_objects import RecipeDetails


@dataclass(frozen=True)
class PlannedMeal:
    """1食分"""

    meal_type: str
    recipe: RecipeDetails

    def to_dict(self) -> dict[str, Any]:
        return {"mealType": self.meal_type, "recipe": self.recipe.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlannedMeal:
        meal_type = str(data.get("mealType") or "").strip().lower()
        if not meal_type:
            raise ValueError("mealType is required for each meal")
        return cls(meal_type=meal_type, recipe=RecipeDetails.from_dict(data.get("recipe") or {}))


@dataclass(frozen=True)
class MealPlanDay:
    """1日分の献立"""

    day: int
    meals: tuple[PlannedMeal, ...]
    date: str | None = None
    daily_totals: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.day < 1:
            raise ValueError(f"day must be 1 or greater, got {self.day}")

    @property
    def meal_types(self) -> list[str]:
        return [m.meal_type for m in self.meals]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "day": self.day,
            "meals": [m.to_dict() for m in self.meals],
        }
        if self.date:
            data["date"] = self.date
        if self.daily_totals:
            data["dailyTotals"] = dict(self.daily_totals)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_day: int = 1) -> MealPlanDay:
        if not isinstance(data, dict):
            raise ValueError("each day must be a JSON object")
        return cls(
            day=int(data.get("day") or default_day),
            meals=tuple(PlannedMeal.from_dict(m) for m in data.get("meals") or []),
            date=data.get("date"),
            daily_totals=dict(data.get("dailyTotals") or {}),
        )


@dataclass(frozen=True)
class MealPlanResult:
    """
    献立生成結果

    LLM の出力をパースした構造化データ。
    """

    days: tuple[MealPlanDay, ...]
    shopping_list: dict[str, list[str]] = field(default_factory=dict)
    nutrition_summary: dict[str, Any] = field(default_factory=dict)

    @property
    def meal_count(self) -> int:
        return sum(len(d.meals) for d in self.days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": [d.to_dict() for d in self.days],
            "shoppingList": {k: list(v) for k, v in self.shopping_list.items()},
            "weeklyNutritionSummary": dict(self.nutrition_summary),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealPlanResult:
        shopping_list = data.get("shoppingList") or {}
        return cls(
            days=tuple(
                MealPlanDay.from_dict(d, default_day=i)
                for i, d in enumerate(data.get("days") or [], start=1)
            ),
            shopping_list={
                str(k): [str(item) for item in v or []]
                for k, v in shopping_list.items()
            }
            if isinstance(shopping_list, dict)
            else {},
            nutrition_summary=dict(data.get("weeklyNutritionSummary") or {}),
        )
