"""Meal Plan Domain Module"""
from .entities.meal_plan import InvalidStateError, MealPlan, PlanStatus
from .value_objects.plan_request import PlanRequest
from .value_objects.meal_plan_day import MealPlanDay, MealPlanResult, PlannedMeal
from .events.meal_plan_events import (
    DomainEvent,
    PlanGenerationRequested,
    PlanGenerationStarted,
    PlanGenerationCompleted,
    PlanGenerationFailed,
)

__all__ = [
    "InvalidStateError",
    "MealPlan",
    "PlanStatus",
    "PlanRequest",
    "MealPlanDay",
    "MealPlanResult",
    "PlannedMeal",
    "DomainEvent",
    "PlanGenerationRequested",
    "PlanGenerationStarted",
    "PlanGenerationCompleted",
    "PlanGenerationFailed",
]
