"""
Business API Lambda Handler

献立の非同期生成リクエストと取得:
- POST /plans/generate          → requested で保存し plan.generate.requested を発行 (202)
- GET  /plans                   → 自分の献立一覧 (新しい順)
- GET  /plans/{planId}          → 献立 (status をポーリング)
- GET  /plans/{planId}/recipes  → 献立のレシピ一覧
"""
from typing import Any

from mealplanner.application.use_cases.meal_plan import (
    GetMealPlanInput,
    GetMealPlanUseCase,
    ListMealPlansInput,
    ListMealPlansUseCase,
    ListPlanRecipesUseCase,
    RequestMealPlanInput,
    RequestMealPlanUseCase,
)
from mealplanner.domain.meal_plan import PlanRequest
from mealplanner.handlers.common import (
    BadRequestError,
    get_query_params,
    get_user_id,
    handle_http,
    match_route,
    not_found,
    parse_body,
    response,
    run_async,
)
from mealplanner.infrastructure.container import get_container


def lambda_handler(event: dict, context: Any) -> dict:
    """Lambda エントリポイント"""
    return handle_http(event, context, dispatch)


def dispatch(method: str, path: str, event: dict) -> dict:
    if method == 'POST' and match_route('/plans/generate', path) is not None:
        return handle_generate_plan(event)
    if method == 'GET' and match_route('/plans', path) is not None:
        return handle_list_plans(event)

    params = match_route('/plans/{planId}/recipes', path)
    if method == 'GET' and params:
        return handle_list_plan_recipes(event, params['planId'])

    params = match_route('/plans/{planId}', path)
    if method == 'GET' and params:
        return handle_get_plan(event, params['planId'])

    return not_found()


def handle_generate_plan(event: dict) -> dict:
    """献立生成をリクエスト"""
    user_id = get_user_id(event)
    plan_request = PlanRequest.from_dict(parse_body(event))

    container = get_container()
    use_case = RequestMealPlanUseCase(
        meal_plan_repository=container.meal_plan_repository,
        event_publisher=container.event_publisher,
    )
    result = run_async(use_case.execute(RequestMealPlanInput(user_id=user_id, request=plan_request)))

    return response(202, {
        'success': True,
        'planId': result.plan_id,
        'status': result.status,
        'message': 'Meal plan generation has been initiated. Check back shortly for results.',
    })


def handle_list_plans(event: dict) -> dict:
    """献立一覧"""
    user_id = get_user_id(event)
    container = get_container()
    query = get_query_params(event)

    try:
        limit = int(query.get('limit', container.settings.plan_list_default_limit))
    except ValueError as e:
        raise BadRequestError('limit must be an integer') from e
    limit = min(limit, container.settings.plan_list_max_limit)

    use_case = ListMealPlansUseCase(meal_plan_repository=container.meal_plan_repository)
    result = run_async(use_case.execute(ListMealPlansInput(
        user_id=user_id,
        limit=limit,
        cursor=query.get('cursor'),
    )))

    body = {'success': True, 'plans': result.plans}
    if result.next_cursor:
        body['nextCursor'] = result.next_cursor
    return response(200, body)


def handle_get_plan(event: dict, plan_id: str) -> dict:
    """献立を取得"""
    user_id = get_user_id(event)
    container = get_container()
    use_case = GetMealPlanUseCase(meal_plan_repository=container.meal_plan_repository)
    result = run_async(use_case.execute(GetMealPlanInput(user_id=user_id, plan_id=plan_id)))
    return response(200, {'success': True, 'plan': result.plan})


def handle_list_plan_recipes(event: dict, plan_id: str) -> dict:
    """献立のレシピ一覧"""
    user_id = get_user_id(event)
    container = get_container()
    use_case = ListPlanRecipesUseCase(
        meal_plan_repository=container.meal_plan_repository,
        recipe_repository=container.recipe_repository,
    )
    result = run_async(use_case.execute(GetMealPlanInput(user_id=user_id, plan_id=plan_id)))
    return response(200, {'success': True, 'planId': result.plan_id, 'recipes': result.recipes})
