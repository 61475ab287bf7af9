"""Generate Meal Plan Use Case (Worker)"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

import structlog

from mealplanner.application.ports.event_publisher import EventPublishError, IEventPublisher
from mealplanner.application.ports.gateways import ILanguageModelGateway, InferenceConfig
from mealplanner.application.ports.repositories import (
    ConcurrencyError,
    IMealPlanRepository,
    IRecipeRepository,
    IUserRepository,
)
from mealplanner.application.prompts import (
    build_meal_plan_system_prompt,
    build_meal_plan_user_message,
)
from mealplanner.application.response_parser import parse_meal_plan
from mealplanner.domain.meal_plan import InvalidStateError, MealPlan, MealPlanResult, PlanStatus
from mealplanner.domain.recipe import SavedRecipe
from mealplanner.domain.user import UserProfile

logger = structlog.get_logger()

MEAL_PLAN_INFERENCE = InferenceConfig(max_tokens=8192, temperature=0.8, top_p=0.9)


class PlanGenerationError(Exception):
    """献立生成エラー"""

    pass


@dataclass
class GenerateMealPlanInput:
    """献立生成入力DTO (plan.generate.requested の detail)"""

    plan_id: str
    user_id: str


@dataclass
class GenerateMealPlanOutput:
    """献立生成出力DTO"""

    plan_id: str
    status: str
    skipped: bool = False
    skip_reason: str = ""
    day_count: int = 0
    recipe_ids: list[str] = field(default_factory=list)


class GenerateMealPlanUseCase:
    """
    献立生成 ユースケース

    1. 献立を取得し generating に遷移（条件付き更新）
    2. ユーザープロフィールを取得
    3. Bedrock で献立を生成
    4. JSON をパース
    5. レシピをバッチ保存
    6. completed に遷移（条件付き更新）
    7. 完了イベントを発行

    2 以降で失敗した場合は failed に遷移してから PlanGenerationError を送出し、
    EventBridge のリトライに委ねる。
    """

    def __init__(
        self,
        meal_plan_repository: IMealPlanRepository,
        user_repository: IUserRepository,
        recipe_repository: IRecipeRepository,
        language_model: ILanguageModelGateway,
        event_publisher: IEventPublisher,
        inference_config: InferenceConfig = MEAL_PLAN_INFERENCE,
    ):
        self._plan_repo = meal_plan_repository
        self._user_repo = user_repository
        self._recipe_repo = recipe_repository
        self._language_model = language_model
        self._event_publisher = event_publisher
        self._inference_config = inference_config

    async def execute(self, input_data: GenerateMealPlanInput) -> GenerateMealPlanOutput:
        """ユースケースを実行"""
        log = logger.bind(plan_id=input_data.plan_id, user_id=input_data.user_id)
        log.info("plan_generation_started")

        # 1. 献立を取得して generating へ
        plan = await self._plan_repo.find_by_id(input_data.plan_id)
        if plan is None:
            log.warning("plan_generation_skipped", reason="plan_not_found")
            return self._skipped(input_data.plan_id, "", "plan_not_found")

        if plan.user_id != input_data.user_id:
            log.warning("plan_generation_skipped", reason="user_mismatch")
            return self._skipped(plan.plan_id, plan.status.value, "user_mismatch")

        previous_status = plan.status
        try:
            plan.start_generation()
            await self._plan_repo.update_status(plan, expected_status=previous_status)
        except InvalidStateError:
            log.info("plan_generation_skipped", reason="already_finished", status=plan.status.value)
            return self._skipped(plan.plan_id, plan.status.value, "already_finished")
        except ConcurrencyError:
            log.info("plan_generation_skipped", reason="status_changed")
            return self._skipped(plan.plan_id, previous_status.value, "status_changed")
        await self._publish_best_effort(plan)

        try:
            # 2. プロフィール取得
            profile = await self._user_repo.find_by_id(plan.user_id)
            if profile is None:
                log.info("user_profile_not_found_using_default")
                profile = UserProfile.default(plan.user_id)

            # 3. Bedrock で生成
            log.info(
                "invoking_language_model",
                duration=plan.request.duration,
                meals_per_day=plan.request.meals_per_day,
            )
            text = await self._language_model.complete(
                system_prompt=build_meal_plan_system_prompt(profile, plan.request.dietary_goal),
                user_message=build_meal_plan_user_message(plan.request),
                config=self._inference_config,
            )

            # 4. パース
            result = parse_meal_plan(text)
            if len(result.days) != plan.request.duration:
                log.warning(
                    "meal_plan_day_count_mismatch",
                    expected=plan.request.duration,
                    actual=len(result.days),
                )

            # 5. レシピ保存
            recipes = self._plan_recipes(plan, result)
            log.info("saving_plan_recipes", recipe_count=len(recipes))
            await self._recipe_repo.save_batch(recipes)

            # 6. 完了
            plan.complete(result)
            await self._plan_repo.update_status(plan, expected_status=PlanStatus.GENERATING)

        except Exception as e:
            if isinstance(e, ConcurrencyError) and await self._completed_elsewhere(plan.plan_id):
                log.info("plan_generation_skipped", reason="completed_by_other_delivery")
                return self._skipped(
                    plan.plan_id, PlanStatus.COMPLETED.value, "completed_by_other_delivery"
                )
            log.error("plan_generation_failed", error=str(e), error_type=type(e).__name__)
            await self._mark_failed(plan, str(e) or type(e).__name__)
            raise PlanGenerationError(f"Failed to generate meal plan {plan.plan_id}: {e}") from e

        # 7. イベント発行
        await self._publish_best_effort(plan)
        log.info("plan_generation_completed", day_count=len(result.days), recipe_count=len(recipes))

        return GenerateMealPlanOutput(
            plan_id=plan.plan_id,
            status=plan.status.value,
            day_count=len(result.days),
            recipe_ids=[r.recipe_id for r in recipes],
        )

    @staticmethod
    def _plan_recipes(plan: MealPlan, result: MealPlanResult) -> list[SavedRecipe]:
        """1食につき1レシピ (同じ日の同じ食事区分は連番で区別)"""
        seen: Counter[tuple[int, str]] = Counter()
        recipes = []
        for day in result.days:
            for meal in day.meals:
                seen[(day.day, meal.meal_type)] += 1
                recipes.append(
                    SavedRecipe.from_planned_meal(
                        plan_id=plan.plan_id,
                        user_id=plan.user_id,
                        day=day.day,
                        meal=meal,
                        date=day.date,
                        ordinal=seen[(day.day, meal.meal_type)],
                    )
                )
        return recipes

    async def _completed_elsewhere(self, plan_id: str) -> bool:
        """同じ献立の別配信が先に完了させたか"""
        current = await self._plan_repo.find_by_id(plan_id)
        return current is not None and current.status == PlanStatus.COMPLETED

    async def _mark_failed(self, plan: MealPlan, reason: str) -> None:
        """failed に遷移 (この時点の失敗は元のエラーを優先してログのみ)"""
        log = logger.bind(plan_id=plan.plan_id)
        try:
            # 保存済みの状態から遷移させる
            current = await self._plan_repo.find_by_id(plan.plan_id)
            if current is None or current.status == PlanStatus.COMPLETED:
                log.warning("plan_failure_not_recorded", reason="plan_missing_or_completed")
                return
            expected_status = current.status
            current.fail(reason)
            await self._plan_repo.update_status(current, expected_status=expected_status)
        except Exception as e:
            log.error("plan_failure_not_recorded", error=str(e))
            return
        await self._publish_best_effort(current)

    async def _publish_best_effort(self, plan: MealPlan) -> None:
        """状態は保存済みのため、通知イベントの失敗はログのみ"""
        try:
            await self._event_publisher.publish_batch(plan.get_uncommitted_events())
        except EventPublishError as e:
            logger.warning("plan_event_publish_failed", plan_id=plan.plan_id, error=str(e))
        finally:
            plan.mark_events_as_committed()

    @staticmethod
    def _skipped(plan_id: str, status: str, reason: str) -> GenerateMealPlanOutput:
        return GenerateMealPlanOutput(
            plan_id=plan_id,
            status=status,
            skipped=True,
            skip_reason=reason,
        )
