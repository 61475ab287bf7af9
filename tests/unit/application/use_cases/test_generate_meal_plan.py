"""GenerateMealPlanUseCase Unit Tests"""
import json

import pytest

from mealplanner.application.ports.gateways import InferenceConfig, LanguageModelError
from mealplanner.application.ports.repositories import ConcurrencyError
from mealplanner.application.use_cases.meal_plan import (
    GenerateMealPlanInput,
    GenerateMealPlanUseCase,
    PlanGenerationError,
)
from mealplanner.domain.meal_plan import MealPlan, MealPlanResult, PlanRequest, PlanStatus


@pytest.fixture
def plan(meal_plan_repository) -> MealPlan:
    plan = MealPlan.request_generation(
        user_id="user-123",
        request=PlanRequest(start_date="2025-01-01", duration=2, meals_per_day=2),
    )
    plan.mark_events_as_committed()
    return meal_plan_repository.put(plan)


@pytest.fixture
def use_case(
    meal_plan_repository,
    user_repository,
    recipe_repository,
    language_model,
    event_publisher,
) -> GenerateMealPlanUseCase:
    return GenerateMealPlanUseCase(
        meal_plan_repository=meal_plan_repository,
        user_repository=user_repository,
        recipe_repository=recipe_repository,
        language_model=language_model,
        event_publisher=event_publisher,
    )


def _input(plan: MealPlan) -> GenerateMealPlanInput:
    return GenerateMealPlanInput(plan_id=plan.plan_id, user_id=plan.user_id)


class TestGenerateMealPlan:
    """献立生成 worker のテスト"""

    async def test_generates_plan(
        self,
        use_case,
        plan,
        registered_user,
        meal_plan_repository,
        recipe_repository,
        language_model,
        event_publisher,
        meal_plan_json,
    ):
        """正常: 生成結果とレシピを保存し completed になる"""
        language_model.response = meal_plan_json

        output = await use_case.execute(_input(plan))

        assert output.status == "completed"
        assert not output.skipped
        assert output.day_count == 2
        assert len(output.recipe_ids) == 4

        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.COMPLETED
        assert stored.recipe_count == 4
        assert stored.completed_at is not None
        assert [u[1:] for u in meal_plan_repository.status_updates] == [
            ("requested", "generating"),
            ("generating", "completed"),
        ]

        recipes = await recipe_repository.find_by_plan(plan.plan_id)
        assert {r.recipe_id for r in recipes} == {
            f"recipe-{plan.plan_id}-day1-breakfast",
            f"recipe-{plan.plan_id}-day1-dinner",
            f"recipe-{plan.plan_id}-day2-breakfast",
            f"recipe-{plan.plan_id}-day2-dinner",
        }
        assert all(r.user_id == "user-123" for r in recipes)

        assert event_publisher.detail_types == [
            "plan.generate.started",
            "plan.generate.completed",
        ]

    async def test_repeated_meal_type_gets_unique_recipe_ids(
        self,
        use_case,
        plan,
        recipe_repository,
        language_model,
        event_publisher,
        meal_plan_dict,
    ):
        """正常: 同じ日に同じ食事区分が重なってもレシピを取りこぼさない"""
        day1 = meal_plan_dict["days"][0]
        template = day1["meals"][0]["recipe"]
        day1["meals"] = [
            {"mealType": "breakfast", "recipe": dict(template, recipeName="Oatmeal")},
            {"mealType": "snack", "recipe": dict(template, recipeName="Apple")},
            {"mealType": "lunch", "recipe": dict(template, recipeName="Salad")},
            {"mealType": "snack", "recipe": dict(template, recipeName="Yogurt")},
        ]
        language_model.response = json.dumps(meal_plan_dict)

        output = await use_case.execute(_input(plan))

        assert len(output.recipe_ids) == 6
        assert len(set(output.recipe_ids)) == 6
        assert f"recipe-{plan.plan_id}-day1-snack" in output.recipe_ids
        assert f"recipe-{plan.plan_id}-day1-snack-2" in output.recipe_ids

        stored = await recipe_repository.find_by_plan(plan.plan_id)
        assert len(stored) == 6
        snacks = {r.recipe_id: r.details.recipe_name for r in stored if r.meal_type == "snack"}
        assert snacks == {
            f"recipe-{plan.plan_id}-day1-snack": "Apple",
            f"recipe-{plan.plan_id}-day1-snack-2": "Yogurt",
        }
        assert event_publisher.events[-1].to_detail()["recipeCount"] == 6

    async def test_prompt_uses_profile_and_inference_config(
        self, use_case, plan, registered_user, language_model, meal_plan_json
    ):
        """正常: プロフィールと献立用の推論パラメータで呼び出す"""
        language_model.response = meal_plan_json

        await use_case.execute(_input(plan))

        (call,) = language_model.calls
        assert "CRITICAL ALLERGIES: peanuts" in call["system_prompt"]
        assert "Generate a 2-day meal plan with 2 meals per day." in call["user_message"]
        assert call["config"] == InferenceConfig(max_tokens=8192, temperature=0.8, top_p=0.9)

    async def test_missing_profile_uses_default(self, use_case, plan, language_model, meal_plan_json):
        """正常: プロフィール未登録でも生成できる"""
        language_model.response = meal_plan_json

        output = await use_case.execute(_input(plan))

        assert output.status == "completed"
        assert "- No specific restrictions" in language_model.calls[0]["system_prompt"]

    async def test_plan_not_found_is_skipped(self, use_case, language_model):
        """正常: 献立が無ければスキップ"""
        output = await use_case.execute(GenerateMealPlanInput(plan_id="missing", user_id="u"))

        assert output.skipped
        assert output.skip_reason == "plan_not_found"
        assert language_model.calls == []

    async def test_user_mismatch_is_skipped(self, use_case, plan, language_model):
        """正常: イベントの userId が献立と異なればスキップ"""
        output = await use_case.execute(
            GenerateMealPlanInput(plan_id=plan.plan_id, user_id="someone-else")
        )

        assert output.skip_reason == "user_mismatch"
        assert language_model.calls == []

    async def test_completed_plan_is_skipped(
        self, use_case, plan, meal_plan_repository, language_model, meal_plan_dict
    ):
        """正常: 完了済みの献立への再配信は何もしない"""
        plan.start_generation()
        plan.complete(MealPlanResult.from_dict(meal_plan_dict))
        meal_plan_repository.put(plan)

        output = await use_case.execute(_input(plan))

        assert output.skipped
        assert output.skip_reason == "already_finished"
        assert output.status == "completed"
        assert language_model.calls == []

    async def test_status_conflict_is_skipped(
        self, use_case, plan, meal_plan_repository, language_model, monkeypatch
    ):
        """正常: 条件付き更新が競合したら別の配信に任せる"""

        async def conflict(plan, expected_status):
            raise ConcurrencyError("status changed")

        monkeypatch.setattr(meal_plan_repository, "update_status", conflict)

        output = await use_case.execute(_input(plan))

        assert output.skip_reason == "status_changed"
        assert output.status == "requested"
        assert language_model.calls == []

    async def test_failed_plan_is_retried(
        self, use_case, plan, meal_plan_repository, language_model, meal_plan_json
    ):
        """正常: failed の献立は EventBridge のリトライで再生成できる"""
        plan.start_generation()
        plan.fail("previous attempt")
        meal_plan_repository.put(plan)
        language_model.response = meal_plan_json

        output = await use_case.execute(_input(plan))

        assert output.status == "completed"
        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.error is None

    async def test_language_model_error_marks_failed(
        self, use_case, plan, meal_plan_repository, language_model, event_publisher
    ):
        """異常: LLM 呼び出し失敗で failed になり例外を送出する"""
        language_model.error = LanguageModelError("throttled")

        with pytest.raises(PlanGenerationError, match="throttled"):
            await use_case.execute(_input(plan))

        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.FAILED
        assert stored.error == "throttled"
        assert event_publisher.detail_types == [
            "plan.generate.started",
            "plan.generate.failed",
        ]

    async def test_unparseable_response_marks_failed(
        self, use_case, plan, meal_plan_repository, recipe_repository, language_model
    ):
        """異常: JSON でない応答は failed、レシピは保存しない"""
        language_model.response = "Sorry, I can't do that."

        with pytest.raises(PlanGenerationError):
            await use_case.execute(_input(plan))

        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.FAILED
        assert "JSON" in stored.error
        assert recipe_repository.items == {}

    async def test_recipe_write_failure_marks_failed(
        self, use_case, plan, meal_plan_repository, recipe_repository, language_model, meal_plan_json
    ):
        """異常: レシピのバッチ保存に失敗"""
        language_model.response = meal_plan_json
        recipe_repository.fail_batch = True

        with pytest.raises(PlanGenerationError):
            await use_case.execute(_input(plan))

        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.FAILED

    async def test_completion_write_failure_marks_failed(
        self, use_case, plan, meal_plan_repository, language_model, meal_plan_json
    ):
        """異常: completed の書き込みに失敗したら保存済みの generating から failed にする"""
        language_model.response = meal_plan_json
        meal_plan_repository.fail_status_update_to = PlanStatus.COMPLETED

        with pytest.raises(PlanGenerationError):
            await use_case.execute(_input(plan))

        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.FAILED

    async def test_completed_by_other_delivery_is_skipped(
        self, use_case, plan, meal_plan_repository, language_model, meal_plan_json, meal_plan_dict
    ):
        """正常: 生成中に別の配信が完了させていたら失敗扱いにしない"""
        language_model.response = meal_plan_json
        original_update = meal_plan_repository.update_status

        async def complete_elsewhere_then_update(target, expected_status):
            if target.status == PlanStatus.COMPLETED:
                other = await meal_plan_repository.find_by_id(target.plan_id)
                other.complete(MealPlanResult.from_dict(meal_plan_dict))
                meal_plan_repository.put(other)
            await original_update(target, expected_status)

        meal_plan_repository.update_status = complete_elsewhere_then_update

        output = await use_case.execute(_input(plan))

        assert output.skipped
        assert output.skip_reason == "completed_by_other_delivery"
        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.COMPLETED

    async def test_completion_event_failure_is_not_fatal(
        self, use_case, plan, meal_plan_repository, language_model, event_publisher, meal_plan_json
    ):
        """正常: 通知イベントの発行失敗は生成結果に影響しない"""
        language_model.response = meal_plan_json
        event_publisher.fail = True

        output = await use_case.execute(_input(plan))

        assert output.status == "completed"
        stored = await meal_plan_repository.find_by_id(plan.plan_id)
        assert stored.status == PlanStatus.COMPLETED
