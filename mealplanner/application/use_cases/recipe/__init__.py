"""Recipe Use Cases"""
from .generate_recipe import GenerateRecipeInput, GenerateRecipeOutput, GenerateRecipeUseCase
from .save_recipe import (
    DeleteRecipeInput,
    DeleteRecipeUseCase,
    ListRecipesInput,
    ListRecipesOutput,
    ListRecipesUseCase,
    RecipeNotFoundError,
    SaveRecipeInput,
    SaveRecipeOutput,
    SaveRecipeUseCase,
)

__all__ = [
    "GenerateRecipeInput",
    "GenerateRecipeOutput",
    "GenerateRecipeUseCase",
    "DeleteRecipeInput",
    "DeleteRecipeUseCase",
    "ListRecipesInput",
    "ListRecipesOutput",
    "ListRecipesUseCase",
    "RecipeNotFoundError",
    "SaveRecipeInput",
    "SaveRecipeOutput",
    "SaveRecipeUseCase",
]
