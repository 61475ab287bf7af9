"""
Recipes Lambda Handler

- POST   /recipes                     → レシピ保存
- GET    /recipes/{userId}            → レシピ一覧
- DELETE /recipes/{userId}/{recipeId} → レシピ削除
"""
from typing import Any

from mealplanner.application.use_cases.recipe import (
    DeleteRecipeInput,
    DeleteRecipeUseCase,
    ListRecipesInput,
    ListRecipesUseCase,
    SaveRecipeInput,
    SaveRecipeUseCase,
)
from mealplanner.handlers.common import (
    BadRequestError,
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
    if method == 'POST' and match_route('/recipes', path) is not None:
        return handle_save_recipe(event)

    params = match_route('/recipes/{userId}', path)
    if params and method == 'GET':
        return handle_list_recipes(params['userId'])

    params = match_route('/recipes/{userId}/{recipeId}', path)
    if params and method == 'DELETE':
        return handle_delete_recipe(params['userId'], params['recipeId'])

    return not_found()


def handle_save_recipe(event: dict) -> dict:
    """
    レシピ保存

    ボディは {"userId", "recipe": {...}} またはレシピ項目をトップレベルに持つ形式。
    userId が無ければ認証情報から取得する。
    """
    body = parse_body(event)
    if not body:
        raise BadRequestError('Request body is required')

    recipe = body.get('recipe') if isinstance(body.get('recipe'), dict) else body
    user_id = body.get('userId') or get_user_id(event)
    recipe_type = body.get('recipeType') or 'general'
    if not isinstance(user_id, str) or not isinstance(recipe_type, str):
        raise BadRequestError('userId and recipeType must be strings')

    container = get_container()
    use_case = SaveRecipeUseCase(
        recipe_repository=container.recipe_repository,
        user_repository=container.user_repository,
    )
    result = run_async(use_case.execute(SaveRecipeInput(
        user_id=user_id,
        recipe=recipe,
        recipe_type=recipe_type,
    )))
    return response(201, {
        'success': True,
        'message': 'Recipe saved successfully',
        'recipe': result.recipe,
    })


def handle_list_recipes(user_id: str) -> dict:
    """レシピ一覧"""
    container = get_container()
    use_case = ListRecipesUseCase(recipe_repository=container.recipe_repository)
    result = run_async(use_case.execute(ListRecipesInput(user_id=user_id)))
    return response(200, {
        'success': True,
        'recipes': result.recipes,
        'count': len(result.recipes),
    })


def handle_delete_recipe(user_id: str, recipe_id: str) -> dict:
    """レシピ削除"""
    container = get_container()
    use_case = DeleteRecipeUseCase(recipe_repository=container.recipe_repository)
    run_async(use_case.execute(DeleteRecipeInput(user_id=user_id, recipe_id=recipe_id)))
    return response(200, {'success': True, 'message': 'Recipe deleted successfully'})
