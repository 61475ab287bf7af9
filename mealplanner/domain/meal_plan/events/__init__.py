"""Meal Plan Domain Events"""
from .meal_plan_events import (
    DomainEvent,
    PlanGenerationCompleted,
    PlanGenerationFailed,
    PlanGenerationRequested,
    PlanGenerationStarted,
)

__all__ = [
    "DomainEvent",
    "PlanGenerationCompleted",
    "PlanGenerationFailed",
    "PlanGenerationRequested",
    "PlanGenerationStarted",
]
