"""Request Meal Plan Use Case"""
from __future__ import annotations

from dataclasses import dataclass

import structlog

from mealplanner.application.ports.event_publisher import EventPublishError, IEventPublisher
from mealplanner.application.ports.repositories import IMealPlanRepository
from mealplanner.domain.meal_plan import MealPlan, PlanRequest, PlanStatus

logger = structlog.get_logger()


@dataclass
class RequestMealPlanInput:
    """献立生成リクエスト入力DTO"""

    user_id: str
    request: PlanRequest


@dataclass
class RequestMealPlanOutput:
    """献立生成リクエスト出力DTO"""

    plan_id: str
    status: str


class RequestMealPlanUseCase:
    """
    献立生成リクエスト ユースケース

    1. requested 状態の献立を作成・保存
    2. plan.generate.requested イベントを発行（worker が非同期で生成）

    イベント発行に失敗した場合、献立が requested のまま残らないよう
    failed に更新してからエラーを伝播する。
    """

    def __init__(
        self,
        meal_plan_repository: IMealPlanRepository,
        event_publisher: IEventPublisher,
    ):
        self._plan_repo = meal_plan_repository
        self._event_publisher = event_publisher

    async def execute(self, input_data: RequestMealPlanInput) -> RequestMealPlanOutput:
        """ユースケースを実行"""
        plan = MealPlan.request_generation(
            user_id=input_data.user_id,
            request=input_data.request,
        )
        log = logger.bind(plan_id=plan.plan_id, user_id=input_data.user_id)
        log.info(
            "meal_plan_requested",
            duration=input_data.request.duration,
            meals_per_day=input_data.request.meals_per_day,
        )

        await self._plan_repo.save(plan)

        try:
            await self._event_publisher.publish_batch(plan.get_uncommitted_events())
        except EventPublishError as e:
            log.error("meal_plan_request_publish_failed", error=str(e))
            plan.mark_events_as_committed()
            plan.fail(f"Failed to enqueue plan generation: {e}")
            await self._plan_repo.update_status(plan, expected_status=PlanStatus.REQUESTED)
            raise

        plan.mark_events_as_committed()
        log.info("meal_plan_request_published")

        return RequestMealPlanOutput(plan_id=plan.plan_id, status=plan.status.value)
