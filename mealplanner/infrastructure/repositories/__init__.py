"""DynamoDB Repositories"""
from .dynamodb_meal_plan_repository import DynamoDBMealPlanRepository
from .dynamodb_recipe_repository import DynamoDBRecipeRepository
from .dynamodb_user_repository import DynamoDBUserRepository

__all__ = [
    "DynamoDBMealPlanRepository",
    "DynamoDBRecipeRepository",
    "DynamoDBUserRepository",
]
