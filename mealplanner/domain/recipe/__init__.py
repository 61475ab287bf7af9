"""Recipe Domain Module"""
from .entities.saved_recipe import SavedRecipe, recipe_id_for
from .value_objects.recipe_details import (
    DietaryCompliance,
    Ingredient,
    NutritionalInfo,
    RecipeDetails,
    RecipeInstruction,
)

__all__ = [
    "SavedRecipe",
    "recipe_id_for",
    "DietaryCompliance",
    "Ingredient",
    "NutritionalInfo",
    "RecipeDetails",
    "RecipeInstruction",
]
