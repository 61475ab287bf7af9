"""Shared Test Fixtures"""
from __future__ import annotations

import json
from typing import Any

import pytest

from mealplanner.application.ports.event_publisher import EventPublishError, IEventPublisher
from mealplanner.application.ports.gateways import ILanguageModelGateway, InferenceConfig
from mealplanner.application.ports.repositories import (
    ConcurrencyError,
    DuplicateItemError,
    IMealPlanRepository,
    IRecipeRepository,
    IUserRepository,
)
from mealplanner.domain.meal_plan import DomainEvent, MealPlan, PlanStatus
from mealplanner.domain.recipe import SavedRecipe
from mealplanner.domain.user import UserPreferences, UserProfile
from mealplanner.infrastructure.config import Settings, get_settings
from mealplanner.infrastructure.container import Container


# === In-Memory Fakes ===


class InMemoryUserRepository(IUserRepository):
    def __init__(self):
        self.users: dict[str, UserProfile] = {}

    async def find_by_id(self, user_id: str) -> UserProfile | None:
        user = self.users.get(user_id)
        return UserProfile.from_dict(user.to_dict(include_secrets=True)) if user else None

    async def find_by_email(self, email: str) -> UserProfile | None:
        for user in self.users.values():
            if user.email == email.strip().lower():
                return await self.find_by_id(user.user_id)
        return None

    async def save(self, user: UserProfile) -> None:
        if user.user_id in self.users:
            raise DuplicateItemError(user.user_id)
        self.users[user.user_id] = user

    async def update(self, user: UserProfile) -> UserProfile:
        if user.user_id not in self.users:
            raise ConcurrencyError(user.user_id)
        self.users[user.user_id] = user
        return user


class InMemoryMealPlanRepository(IMealPlanRepository):
    """保存時に辞書へ変換し、DynamoDB と同じく読み出しごとに別インスタンスを返す"""

    def __init__(self):
        self.items: dict[str, dict[str, Any]] = {}
        self.status_updates: list[tuple[str, str, str]] = []
        self.fail_status_update_to: PlanStatus | None = None

    async def save(self, plan: MealPlan) -> None:
        if plan.plan_id in self.items:
            raise DuplicateItemError(plan.plan_id)
        self.items[plan.plan_id] = plan.to_dict()

    async def find_by_id(self, plan_id: str) -> MealPlan | None:
        item = self.items.get(plan_id)
        return MealPlan.from_dict(item) if item else None

    async def find_by_user(
        self,
        user_id: str,
        limit: int = 20,
        cursor: str | None = None,
    ) -> tuple[list[MealPlan], str | None]:
        plans = sorted(
            (MealPlan.from_dict(i) for i in self.items.values() if i["userId"] == user_id),
            key=lambda p: p.created_at,
            reverse=True,
        )
        start = int(cursor) if cursor else 0
        page = plans[start : start + limit]
        next_cursor = str(start + limit) if start + limit < len(plans) else None
        return page, next_cursor

    async def update_status(self, plan: MealPlan, expected_status: PlanStatus) -> None:
        if self.fail_status_update_to == plan.status:
            raise RuntimeError(f"simulated write failure to {plan.status.value}")
        stored = self.items.get(plan.plan_id)
        if stored is None or stored["status"] != expected_status.value:
            raise ConcurrencyError(plan.plan_id)
        self.items[plan.plan_id] = plan.to_dict()
        self.status_updates.append((plan.plan_id, expected_status.value, plan.status.value))

    def put(self, plan: MealPlan) -> MealPlan:
        """テスト用: 状態を直接書き込む"""
        self.items[plan.plan_id] = plan.to_dict()
        return plan


class InMemoryRecipeRepository(IRecipeRepository):
    def __init__(self):
        self.items: dict[tuple[str, str], dict[str, Any]] = {}
        self.batch_calls = 0
        self.fail_batch = False

    async def save(self, recipe: SavedRecipe) -> None:
        self.items[(recipe.user_id, recipe.recipe_id)] = recipe.to_dict()

    async def save_batch(self, recipes: list[SavedRecipe]) -> None:
        if self.fail_batch:
            raise RuntimeError("simulated batch write failure")
        self.batch_calls += 1
        for recipe in recipes:
            await self.save(recipe)

    async def find(self, user_id: str, recipe_id: str) -> SavedRecipe | None:
        item = self.items.get((user_id, recipe_id))
        return SavedRecipe.from_dict(item) if item else None

    async def find_by_user(self, user_id: str, limit: int = 100) -> list[SavedRecipe]:
        recipes = [SavedRecipe.from_dict(i) for (uid, _), i in self.items.items() if uid == user_id]
        recipes.sort(key=lambda r: r.created_at, reverse=True)
        return recipes[:limit]

    async def find_by_plan(self, plan_id: str) -> list[SavedRecipe]:
        return [SavedRecipe.from_dict(i) for i in self.items.values() if i.get("planId") == plan_id]

    async def delete(self, user_id: str, recipe_id: str) -> bool:
        return self.items.pop((user_id, recipe_id), None) is not None


class FakeLanguageModel(ILanguageModelGateway):
    def __init__(self, response: str = ""):
        self.response = response
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        config: InferenceConfig | None = None,
    ) -> str:
        self.calls.append(
            {"system_prompt": system_prompt, "user_message": user_message, "config": config}
        )
        if self.error:
            raise self.error
        return self.response


class RecordingEventPublisher(IEventPublisher):
    def __init__(self):
        self.events: list[DomainEvent] = []
        self.fail = False

    async def publish(self, event: DomainEvent) -> None:
        await self.publish_batch([event])

    async def publish_batch(self, events: list[DomainEvent]) -> None:
        if self.fail:
            raise EventPublishError("simulated EventBridge outage")
        self.events.extend(events)

    @property
    def detail_types(self) -> list[str]:
        return [e.detail_type for e in self.events]


# === Sample Data ===


def make_recipe_dict(name: str, calories: int = 450) -> dict[str, Any]:
    return {
        "recipeName": name,
        "description": f"{name} for testing",
        "prepTime": "10 minutes",
        "cookTime": "20 minutes",
        "totalTime": "30 minutes",
        "servings": 2,
        "difficulty": "Easy",
        "ingredients": [
            {"item": "chicken breast", "quantity": "200g"},
            {"item": "olive oil", "quantity": "1 tbsp", "notes": "extra virgin"},
        ],
        "instructions": [
            {"step": 1, "instruction": "Season the chicken."},
            {"step": 2, "instruction": "Pan fry for 10 minutes."},
        ],
        "nutritionalInfo": {
            "perServing": {
                "calories": calories,
                "protein": "35g",
                "carbohydrates": "20g",
                "fat": "12g",
            }
        },
        "tags": ["high-protein"],
    }


def make_meal_plan_dict(days: int = 2, meal_types: tuple[str, ...] = ("breakfast", "dinner")) -> dict:
    return {
        "days": [
            {
                "day": d,
                "date": f"2025-01-0{d}",
                "meals": [
                    {"mealType": m, "recipe": make_recipe_dict(f"Day {d} {m}")}
                    for m in meal_types
                ],
                "dailyTotals": {"calories": 900},
            }
            for d in range(1, days + 1)
        ],
        "shoppingList": {"proteins": ["chicken breast"], "pantry": ["olive oil"]},
        "weeklyNutritionSummary": {"averageDailyCalories": 900},
    }


@pytest.fixture
def recipe_dict() -> dict[str, Any]:
    return make_recipe_dict("Garlic Chicken")


@pytest.fixture
def meal_plan_dict() -> dict[str, Any]:
    return make_meal_plan_dict()


@pytest.fixture
def meal_plan_json(meal_plan_dict) -> str:
    """LLM が返す献立 JSON (2日 × 2食)"""
    return json.dumps(meal_plan_dict)


# === Fixtures ===


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def meal_plan_repository() -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def language_model() -> FakeLanguageModel:
    return FakeLanguageModel()


@pytest.fixture
def event_publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def registered_user(user_repository: InMemoryUserRepository) -> UserProfile:
    user = UserProfile(
        user_id="user-123",
        email="cook@example.com",
        name="Cook",
        dietary_restrictions=["vegetarian"],
        allergies=["peanuts"],
        target_calories=1800,
        preferences=UserPreferences(cuisine_types=["Italian"], skill_level="intermediate"),
    )
    user_repository.users[user.user_id] = user
    return user


@pytest.fixture
def container(
    user_repository,
    meal_plan_repository,
    recipe_repository,
    language_model,
    event_publisher,
) -> Container:
    return Container(
        settings=Settings(default_user_id=""),
        user_repository=user_repository,
        meal_plan_repository=meal_plan_repository,
        recipe_repository=recipe_repository,
        language_model=language_model,
        event_publisher=event_publisher,
    )

