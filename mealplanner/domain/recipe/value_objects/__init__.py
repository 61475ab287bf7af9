"""Recipe Value Objects"""
from .recipe_details import (
    DietaryCompliance,
    Ingredient,
    NutritionalInfo,
    RecipeDetails,
    RecipeInstruction,
)

__all__ = [
    "DietaryCompliance",
    "Ingredient",
    "NutritionalInfo",
    "RecipeDetails",
    "RecipeInstruction",
]
