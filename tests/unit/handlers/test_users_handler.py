"""Users Handler Unit Tests"""
from lambda_events import api_event, body_of

from mealplanner.handlers.users.handler import lambda_handler


class TestUsersHandler:
    """/users のテスト"""

    def test_register(self, lambda_context, user_repository):
        """正常: 201 で登録"""
        result = lambda_handler(
            api_event(
                "POST",
                "/users",
                {
                    "email": "chef@example.com",
                    "name": "Chef",
                    "password": "pw123456",
                    "allergies": ["shellfish"],
                },
            ),
            lambda_context,
        )

        assert result["statusCode"] == 201
        body = body_of(result)
        assert body["message"] == "User registered successfully"
        assert body["user"]["allergies"] == ["shellfish"]
        assert "passwordHash" not in body["user"]
        assert body["user"]["userId"] in user_repository.users

    def test_register_missing_fields(self, lambda_context):
        """異常: 必須項目なし"""
        result = lambda_handler(
            api_event("POST", "/users", {"email": "chef@example.com"}), lambda_context
        )

        assert result["statusCode"] == 400

    def test_register_duplicate_email(self, lambda_context, registered_user):
        """異常: メールアドレス重複は 409"""
        result = lambda_handler(
            api_event(
                "POST",
                "/users",
                {"email": "cook@example.com", "name": "Again", "password": "pw"},
            ),
            lambda_context,
        )

        assert result["statusCode"] == 409

    def test_register_invalid_field_type(self, lambda_context):
        """異常: allergies が配列でない"""
        result = lambda_handler(
            api_event(
                "POST",
                "/users",
                {"email": "a@example.com", "name": "A", "password": "pw", "allergies": "nuts"},
            ),
            lambda_context,
        )

        assert result["statusCode"] == 400
        assert "allergies" in body_of(result)["error"]

    def test_get_user(self, lambda_context, registered_user):
        """正常: プロフィール取得"""
        result = lambda_handler(api_event("GET", "/users/user-123"), lambda_context)

        assert result["statusCode"] == 200
        assert body_of(result)["user"]["email"] == "cook@example.com"

    def test_get_missing_user(self, lambda_context):
        """異常: 404"""
        result = lambda_handler(api_event("GET", "/users/ghost"), lambda_context)

        assert result["statusCode"] == 404

    def test_update_profile(self, lambda_context, registered_user):
        """正常: 部分更新"""
        result = lambda_handler(
            api_event("PUT", "/users/user-123", {"targetCalories": 2100}), lambda_context
        )

        assert result["statusCode"] == 200
        body = body_of(result)
        assert body["message"] == "Profile updated successfully"
        assert body["user"]["targetCalories"] == 2100
        assert body["user"]["dietaryRestrictions"] == ["vegetarian"]

    def test_update_invalid_cuisine_types(self, lambda_context, registered_user, user_repository):
        """異常: cuisineTypes が配列でも文字列でもなければ 400"""
        result = lambda_handler(
            api_event("PUT", "/users/user-123", {"preferences": {"cuisineTypes": 5}}),
            lambda_context,
        )

        assert result["statusCode"] == 400
        assert "cuisineTypes" in body_of(result)["error"]

    def test_register_negative_calories(self, lambda_context, user_repository):
        """異常: 登録時の targetCalories が負なら 400"""
        result = lambda_handler(
            api_event(
                "POST",
                "/users",
                {"email": "a@example.com", "name": "A", "password": "pw", "targetCalories": -100},
            ),
            lambda_context,
        )

        assert result["statusCode"] == 400
        assert "targetCalories" in body_of(result)["error"]

    def test_update_without_body(self, lambda_context, registered_user):
        """異常: ボディなし"""
        result = lambda_handler(api_event("PUT", "/users/user-123"), lambda_context)

        assert result["statusCode"] == 400
