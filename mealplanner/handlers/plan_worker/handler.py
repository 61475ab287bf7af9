"""
Meal Plan Worker Lambda

EventBridge の plan.generate.requested を受けて献立を生成する。
失敗時は例外を再送出し、EventBridge ルールのリトライに委ねる。
同じイベントの重複配信は献立の条件付きステータス更新でスキップされる。
"""
from typing import Any

import structlog

from mealplanner.application.use_cases.meal_plan import (
    GenerateMealPlanInput,
    GenerateMealPlanUseCase,
)
from mealplanner.domain.meal_plan import PlanGenerationRequested
from mealplanner.handlers.common import bind_request_context, run_async
from mealplanner.infrastructure.container import get_container

logger = structlog.get_logger()


def lambda_handler(event: dict, context: Any) -> dict:
    """Lambda エントリポイント"""
    detail_type = event.get('detail-type', '')
    detail = event.get('detail') or {}
    plan_id = detail.get('planId')
    bind_request_context(event, context, plan_id=plan_id, detail_type=detail_type)

    if detail_type != PlanGenerationRequested.detail_type:
        logger.info('event_ignored', reason='unsupported_detail_type')
        return {'status': 'ignored', 'reason': 'unsupported_detail_type'}

    user_id = detail.get('userId')
    if not plan_id or not user_id:
        logger.error('event_ignored', reason='missing_plan_or_user')
        return {'status': 'ignored', 'reason': 'missing_plan_or_user'}

    container = get_container()
    use_case = GenerateMealPlanUseCase(
        meal_plan_repository=container.meal_plan_repository,
        user_repository=container.user_repository,
        recipe_repository=container.recipe_repository,
        language_model=container.language_model,
        event_publisher=container.event_publisher,
        inference_config=container.plan_inference,
    )

    # PlanGenerationError はそのまま送出 (リトライ対象)
    result = run_async(use_case.execute(GenerateMealPlanInput(plan_id=plan_id, user_id=user_id)))

    if result.skipped:
        return {'status': 'skipped', 'planId': result.plan_id, 'reason': result.skip_reason}
    return {
        'status': result.status,
        'planId': result.plan_id,
        'dayCount': result.day_count,
        'recipeCount': len(result.recipe_ids),
    }
