"""Meal Plan Use Cases"""
from .request_meal_plan import (
    RequestMealPlanInput,
    RequestMealPlanOutput,
    RequestMealPlanUseCase,
)
from .generate_meal_plan import (
    GenerateMealPlanInput,
    GenerateMealPlanOutput,
    GenerateMealPlanUseCase,
    PlanGenerationError,
)
from .get_meal_plan import (
    GetMealPlanInput,
    GetMealPlanOutput,
    GetMealPlanUseCase,
    ListMealPlansInput,
    ListMealPlansOutput,
    ListMealPlansUseCase,
    ListPlanRecipesOutput,
    ListPlanRecipesUseCase,
    PlanAccessDeniedError,
    PlanNotFoundError,
)

__all__ = [
    "RequestMealPlanInput",
    "RequestMealPlanOutput",
    "RequestMealPlanUseCase",
    "GenerateMealPlanInput",
    "GenerateMealPlanOutput",
    "GenerateMealPlanUseCase",
    "PlanGenerationError",
    "GetMealPlanInput",
    "GetMealPlanOutput",
    "GetMealPlanUseCase",
    "ListMealPlansInput",
    "ListMealPlansOutput",
    "ListMealPlansUseCase",
    "ListPlanRecipesOutput",
    "ListPlanRecipesUseCase",
    "PlanAccessDeniedError",
    "PlanNotFoundError",
]
