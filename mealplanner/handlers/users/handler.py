"""
Users Lambda Handler

- POST /users            → ユーザー登録
- GET  /users/{userId}   → プロフィール取得
- PUT  /users/{userId}   → プロフィール部分更新
"""
from typing import Any

from mealplanner.application.use_cases.user import (
    GetUserInput,
    GetUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from mealplanner.handlers.common import (
    BadRequestError,
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
    if method == 'POST' and match_route('/users', path) is not None:
        return handle_register(event)

    params = match_route('/users/{userId}', path)
    if params and method == 'GET':
        return handle_get_user(params['userId'])
    if params and method == 'PUT':
        return handle_update_profile(event, params['userId'])

    return not_found()


def handle_register(event: dict) -> dict:
    """ユーザー登録"""
    body = parse_body(event)
    container = get_container()
    use_case = RegisterUserUseCase(user_repository=container.user_repository)
    result = run_async(use_case.execute(RegisterUserInput(
        email=_optional_str(body, 'email') or '',
        name=_optional_str(body, 'name') or '',
        password=_optional_str(body, 'password') or '',
        dietary_restrictions=_optional_str_list(body, 'dietaryRestrictions') or [],
        allergies=_optional_str_list(body, 'allergies') or [],
        target_calories=_optional_int(body, 'targetCalories'),
        preferences=_optional_dict(body, 'preferences'),
    )))
    return response(201, {
        'success': True,
        'message': 'User registered successfully',
        'user': result.user,
    })


def handle_get_user(user_id: str) -> dict:
    """プロフィール取得"""
    container = get_container()
    use_case = GetUserUseCase(user_repository=container.user_repository)
    result = run_async(use_case.execute(GetUserInput(user_id=user_id)))
    return response(200, {'success': True, 'user': result.user})


def handle_update_profile(event: dict, user_id: str) -> dict:
    """プロフィール更新"""
    body = parse_body(event)
    if not body:
        raise BadRequestError('Request body is required')

    container = get_container()
    use_case = UpdateProfileUseCase(user_repository=container.user_repository)
    result = run_async(use_case.execute(UpdateProfileInput(
        user_id=user_id,
        name=_optional_str(body, 'name'),
        dietary_restrictions=_optional_str_list(body, 'dietaryRestrictions'),
        allergies=_optional_str_list(body, 'allergies'),
        target_calories=_optional_int(body, 'targetCalories'),
        preferences=_optional_dict(body, 'preferences'),
    )))
    return response(200, {
        'success': True,
        'message': 'Profile updated successfully',
        'user': result.user,
    })


# === Body Field Validation ===


def _optional_str(body: dict, key: str) -> str | None:
    value = body.get(key)
    if value is not None and not isinstance(value, str):
        raise BadRequestError(f'{key} must be a string')
    return value


def _optional_str_list(body: dict, key: str) -> list[str] | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise BadRequestError(f'{key} must be a list of strings')
    return value


def _optional_int(body: dict, key: str) -> int | None:
    value = body.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequestError(f'{key} must be an integer')
    return value


def _optional_dict(body: dict, key: str) -> dict | None:
    value = body.get(key)
    if value is not None and not isinstance(value, dict):
        raise BadRequestError(f'{key} must be an object')
    return value
