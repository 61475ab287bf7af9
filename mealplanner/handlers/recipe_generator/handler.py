"""
Recipe Generator Lambda Handler

POST /recipes/generate: 手持ちの食材からレシピを同期生成する。
ユーザーの食事プロフィール (アレルギー・制限) をプロンプトに反映する。
"""
from typing import Any

from mealplanner.application.use_cases.recipe import GenerateRecipeInput, GenerateRecipeUseCase
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
    if method == 'POST' and match_route('/recipes/generate', path) is not None:
        return handle_generate_recipe(event)
    return not_found()


def handle_generate_recipe(event: dict) -> dict:
    """レシピを生成"""
    user_id = get_user_id(event)
    body = parse_body(event)

    ingredients = body.get('ingredients')
    if isinstance(ingredients, list):
        ingredients = ', '.join(str(i) for i in ingredients)
    if not isinstance(ingredients, str) or not ingredients.strip():
        raise BadRequestError('Ingredients are required')

    servings = body.get('servings')
    if servings is not None and (isinstance(servings, bool) or not isinstance(servings, int)):
        raise BadRequestError('servings must be an integer')

    container = get_container()
    use_case = GenerateRecipeUseCase(
        user_repository=container.user_repository,
        language_model=container.language_model,
        inference_config=container.recipe_inference,
    )
    result = run_async(use_case.execute(GenerateRecipeInput(
        user_id=user_id,
        ingredients=ingredients,
        meal_type=body.get('mealType'),
        servings=servings,
        additional_notes=body.get('additionalNotes'),
    )))

    payload: dict[str, Any] = {
        'success': True,
        'userId': result.user_id,
        'generatedAt': result.generated_at,
    }
    if result.recipe is not None:
        payload['recipe'] = result.recipe
    else:
        payload['rawResponse'] = result.raw_response
        payload['warning'] = result.warning
    return response(200, payload)
