"""Meal Plan Value Objects"""
from .meal_plan_day import MealPlanDay, MealPlanResult, PlannedMeal
from .plan_request import PlanRequest

__all__ = ["MealPlanDay", "MealPlanResult", "PlannedMeal", "PlanRequest"]
