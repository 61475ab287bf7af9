"""Plan Worker Handler Unit Tests"""
import pytest

from lambda_events import eventbridge_event

from mealplanner.application.use_cases.meal_plan import PlanGenerationError
from mealplanner.domain.meal_plan import MealPlan, PlanRequest, PlanStatus
from mealplanner.handlers.plan_worker.handler import lambda_handler


@pytest.fixture
def plan(meal_plan_repository) -> MealPlan:
    plan = MealPlan.request_generation(
        user_id="user-123",
        request=PlanRequest(start_date="2025-01-01", duration=2, meals_per_day=2),
    )
    plan.mark_events_as_committed()
    return meal_plan_repository.put(plan)


class TestPlanWorker:
    """献立生成 worker のテスト"""

    def test_generates_plan(
        self, lambda_context, plan, meal_plan_repository, language_model, meal_plan_json
    ):
        """正常: 献立を生成して completed にする"""
        language_model.response = meal_plan_json

        result = lambda_handler(eventbridge_event(plan.plan_id), lambda_context)

        assert result == {
            "status": "completed",
            "planId": plan.plan_id,
            "dayCount": 2,
            "recipeCount": 4,
        }
        assert meal_plan_repository.items[plan.plan_id]["status"] == PlanStatus.COMPLETED.value
        assert language_model.calls[0]["config"].max_tokens == 8192

    def test_redelivery_is_skipped(self, lambda_context, plan, language_model, meal_plan_json):
        """正常: 完了後の再配信はスキップ"""
        language_model.response = meal_plan_json
        lambda_handler(eventbridge_event(plan.plan_id), lambda_context)

        result = lambda_handler(eventbridge_event(plan.plan_id), lambda_context)

        assert result == {"status": "skipped", "planId": plan.plan_id, "reason": "already_finished"}
        assert len(language_model.calls) == 1

    def test_failure_is_raised_for_retry(self, lambda_context, plan, language_model):
        """異常: 生成失敗は例外を送出して EventBridge にリトライさせる"""
        language_model.response = "not json"

        with pytest.raises(PlanGenerationError):
            lambda_handler(eventbridge_event(plan.plan_id), lambda_context)

    def test_unsupported_detail_type(self, lambda_context, language_model):
        """正常: 対象外のイベントは無視"""
        result = lambda_handler(
            eventbridge_event("p", detail_type="plan.generate.completed"), lambda_context
        )

        assert result == {"status": "ignored", "reason": "unsupported_detail_type"}
        assert language_model.calls == []

    def test_missing_ids(self, lambda_context):
        """異常: planId が無いイベント"""
        result = lambda_handler(eventbridge_event(""), lambda_context)

        assert result == {"status": "ignored", "reason": "missing_plan_or_user"}
