"""Application Ports (Interfaces)"""
from .repositories import (
    ConcurrencyError,
    DuplicateItemError,
    IMealPlanRepository,
    IRecipeRepository,
    IUserRepository,
)
from .gateways import ILanguageModelGateway, InferenceConfig, LanguageModelError
from .event_publisher import EventPublishError, IEventPublisher

__all__ = [
    "ConcurrencyError",
    "DuplicateItemError",
    "IMealPlanRepository",
    "IRecipeRepository",
    "IUserRepository",
    "ILanguageModelGateway",
    "InferenceConfig",
    "LanguageModelError",
    "EventPublishError",
    "IEventPublisher",
]
