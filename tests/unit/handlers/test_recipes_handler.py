"""Recipes Handler Unit Tests"""
from lambda_events import api_event, body_of

from mealplanner.domain.recipe import RecipeDetails, SavedRecipe
from mealplanner.handlers.recipes.handler import lambda_handler


class TestRecipesHandler:
    """/recipes のテスト"""

    def test_save_wrapped_recipe(self, lambda_context, registered_user, recipe_repository, recipe_dict):
        """正常: {"userId", "recipe"} 形式で保存"""
        result = lambda_handler(
            api_event(
                "POST",
                "/recipes",
                {"userId": "user-123", "recipe": recipe_dict, "recipeType": "dinner"},
                user_id=None,
            ),
            lambda_context,
        )

        assert result["statusCode"] == 201
        saved = body_of(result)["recipe"]
        assert saved["recipeType"] == "dinner"
        assert ("user-123", saved["recipeId"]) in recipe_repository.items

    def test_save_flat_recipe_uses_caller(self, lambda_context, registered_user, recipe_dict):
        """正常: トップレベルのレシピ項目と認証ユーザー"""
        result = lambda_handler(api_event("POST", "/recipes", recipe_dict), lambda_context)

        assert result["statusCode"] == 201
        assert body_of(result)["recipe"]["userId"] == "user-123"

    def test_save_for_unknown_user(self, lambda_context, recipe_dict):
        """異常: 未登録ユーザーは 404"""
        result = lambda_handler(
            api_event("POST", "/recipes", {"userId": "ghost", "recipe": recipe_dict}),
            lambda_context,
        )

        assert result["statusCode"] == 404

    def test_save_with_non_object_ingredients(self, lambda_context, registered_user, recipe_repository):
        """異常: 材料がオブジェクトでも文字列でもなければ 400"""
        result = lambda_handler(
            api_event("POST", "/recipes", {"recipeName": "Soup", "ingredients": [1, 2]}),
            lambda_context,
        )

        assert result["statusCode"] == 400
        assert "Invalid ingredient" in body_of(result)["error"]
        assert recipe_repository.items == {}

    def test_save_with_non_string_recipe_type(self, lambda_context, registered_user, recipe_dict):
        """異常: recipeType が文字列でなければ 400"""
        result = lambda_handler(
            api_event("POST", "/recipes", {"recipe": recipe_dict, "recipeType": 3}),
            lambda_context,
        )

        assert result["statusCode"] == 400

    def test_list_and_delete(self, lambda_context, recipe_repository, recipe_dict):
        """正常: 一覧と削除"""
        recipe = SavedRecipe(
            user_id="user-123",
            recipe_id="r-1",
            details=RecipeDetails.from_dict(recipe_dict),
        )
        recipe_repository.items[("user-123", "r-1")] = recipe.to_dict()

        listed = body_of(lambda_handler(api_event("GET", "/recipes/user-123"), lambda_context))
        deleted = lambda_handler(api_event("DELETE", "/recipes/user-123/r-1"), lambda_context)

        assert listed["count"] == 1
        assert listed["recipes"][0]["recipeId"] == "r-1"
        assert deleted["statusCode"] == 200
        assert recipe_repository.items == {}

    def test_delete_missing(self, lambda_context):
        """異常: 存在しないレシピの削除は 404"""
        result = lambda_handler(api_event("DELETE", "/recipes/user-123/missing"), lambda_context)

        assert result["statusCode"] == 404
