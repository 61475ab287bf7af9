"""FastAPI Application Unit Tests"""
import json

import pytest
from fastapi.testclient import TestClient

from mealplanner.domain.meal_plan import MealPlan, PlanRequest
from mealplanner.presentation.api.dependencies import get_app_container
from mealplanner.presentation.main import create_app

USER_HEADERS = {"X-User-Id": "user-123"}


@pytest.fixture
def app(container):
    app = create_app()
    app.dependency_overrides[get_app_container] = lambda: container
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


class TestHealth:
    """ヘルスチェックのテスト"""

    def test_health(self, client):
        """正常: サービス名と環境"""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "meal-planner"

    def test_request_id_is_echoed(self, client):
        """正常: X-Request-ID をレスポンスに返す"""
        response = client.get("/ready", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
        assert response.json()["checks"]["plans_table"] == "meal-planner-plans"


class TestPlanRoutes:
    """/api/v1/plans のテスト"""

    def test_generate_then_poll(self, client, event_publisher):
        """正常: 202 で受け付け、取得すると requested"""
        response = client.post(
            "/api/v1/plans/generate",
            json={"duration": 3, "mealsPerDay": 2, "startDate": "2025-02-01"},
            headers=USER_HEADERS,
        )

        assert response.status_code == 202
        plan_id = response.json()["planId"]
        assert event_publisher.detail_types == ["plan.generate.requested"]

        polled = client.get(f"/api/v1/plans/{plan_id}", headers=USER_HEADERS)
        assert polled.status_code == 200
        assert polled.json()["plan"]["status"] == "requested"
        assert polled.json()["plan"]["startDate"] == "2025-02-01"

    def test_invalid_request(self, client):
        """異常: 日数の範囲外は 400"""
        response = client.post(
            "/api/v1/plans/generate", json={"duration": 0}, headers=USER_HEADERS
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_missing_user(self, client):
        """異常: X-User-Id もデフォルトも無ければ 401"""
        response = client.get("/api/v1/plans")

        assert response.status_code == 401

    def test_other_users_plan(self, client, meal_plan_repository):
        """異常: 他ユーザーの献立は 403"""
        plan = MealPlan.request_generation(user_id="owner", request=PlanRequest())
        meal_plan_repository.put(plan)

        response = client.get(f"/api/v1/plans/{plan.plan_id}", headers=USER_HEADERS)

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": f"Plan {plan.plan_id} belongs to another user",
            "code": "ACCESS_DENIED",
        }

    def test_list_plans(self, client, meal_plan_repository):
        """正常: 自分の献立のみ"""
        for user_id in ("user-123", "owner"):
            meal_plan_repository.put(
                MealPlan.request_generation(user_id=user_id, request=PlanRequest())
            )

        response = client.get("/api/v1/plans?limit=500", headers=USER_HEADERS)

        assert response.status_code == 200
        assert [p["userId"] for p in response.json()["plans"]] == ["user-123"]
        assert response.json()["nextCursor"] is None

    def test_publish_failure_is_internal_error(self, client, event_publisher):
        """異常: 想定外のエラーは 500"""
        event_publisher.fail = True

        response = client.post("/api/v1/plans/generate", json={}, headers=USER_HEADERS)

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"


class TestRecipeRoutes:
    """/api/v1/recipes のテスト"""

    def test_generate_recipe(self, client, registered_user, language_model, recipe_dict):
        """正常: 生成したレシピを返す"""
        language_model.response = json.dumps(recipe_dict)

        response = client.post(
            "/api/v1/recipes/generate",
            json={"ingredients": "chicken, garlic"},
            headers=USER_HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["recipe"]["recipeName"] == "Garlic Chicken"
        assert "rawResponse" not in body

    def test_save_list_delete(self, client, registered_user, recipe_dict):
        """正常: 保存・一覧・削除"""
        saved = client.post(
            "/api/v1/recipes",
            json={"recipe": recipe_dict, "recipeType": "dinner"},
            headers=USER_HEADERS,
        )
        assert saved.status_code == 201
        recipe_id = saved.json()["recipe"]["recipeId"]

        listed = client.get("/api/v1/recipes", headers=USER_HEADERS)
        assert listed.json()["count"] == 1

        deleted = client.delete(f"/api/v1/recipes/{recipe_id}", headers=USER_HEADERS)
        assert deleted.status_code == 200

        missing = client.delete(f"/api/v1/recipes/{recipe_id}", headers=USER_HEADERS)
        assert missing.status_code == 404
        assert missing.json()["code"] == "RECIPE_NOT_FOUND"

    def test_save_with_invalid_ingredients(self, client, registered_user):
        """異常: 材料の型が不正なら 400"""
        response = client.post(
            "/api/v1/recipes",
            json={"recipe": {"recipeName": "Soup", "ingredients": [1, 2]}},
            headers=USER_HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestUserRoutes:
    """/api/v1/users のテスト"""

    def test_register_and_update(self, client):
        """正常: 登録して部分更新"""
        registered = client.post(
            "/api/v1/users",
            json={"email": "chef@example.com", "name": "Chef", "password": "pw123456"},
        )
        assert registered.status_code == 201
        user_id = registered.json()["user"]["userId"]

        updated = client.put(
            f"/api/v1/users/{user_id}",
            json={"preferences": {"skillLevel": "advanced"}},
        )
        assert updated.status_code == 200
        assert updated.json()["user"]["preferences"]["skillLevel"] == "advanced"

    def test_duplicate_email(self, client, registered_user):
        """異常: 409"""
        response = client.post(
            "/api/v1/users",
            json={"email": "cook@example.com", "name": "Again", "password": "pw"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "USER_ALREADY_EXISTS"

    def test_get_missing_user(self, client):
        """異常: 404"""
        assert client.get("/api/v1/users/ghost").status_code == 404
