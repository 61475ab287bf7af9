"""Recipe Entities"""
from .saved_recipe import SavedRecipe, recipe_id_for

__all__ = ["SavedRecipe", "recipe_id_for"]
