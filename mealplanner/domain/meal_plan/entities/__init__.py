"""Meal Plan Entities"""
from .meal_plan import (
    ALLOWED_TRANSITIONS,
    InvalidStateError,
    MealPlan,
    PlanStatus,
    generate_plan_id,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "InvalidStateError",
    "MealPlan",
    "PlanStatus",
    "generate_plan_id",
]
