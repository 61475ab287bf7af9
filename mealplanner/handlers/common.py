"""
Lambda Handler Utilities

API Gateway (REST v1 / HTTP API v2) イベントの解釈、レスポンス生成、
例外 → ステータスコード変換を全ハンドラーで共通化する。
"""
from __future__ import annotations

import asyncio
import base64
import json
import re
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from mealplanner.application.ports.repositories import ConcurrencyError
from mealplanner.application.use_cases.meal_plan import PlanAccessDeniedError, PlanNotFoundError
from mealplanner.application.use_cases.recipe import RecipeNotFoundError
from mealplanner.application.use_cases.user import UserAlreadyExistsError, UserNotFoundError
from mealplanner.domain.meal_plan import InvalidStateError
from mealplanner.infrastructure.config import get_settings
from mealplanner.infrastructure.logging_config import ensure_logging_configured

logger = structlog.get_logger()

T = TypeVar('T')

CORS_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Authorization,X-User-Id',
    'Access-Control-Allow-Methods': 'GET,POST,PUT,DELETE,OPTIONS',
}


class BadRequestError(Exception):
    """リクエスト形式エラー (400)"""

    pass


class UnauthorizedError(Exception):
    """呼び出し元ユーザーを特定できないエラー (401)"""

    pass


# 例外 → HTTP ステータス (先に一致したものを採用)
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (BadRequestError, 400),
    (UnauthorizedError, 401),
    (PlanAccessDeniedError, 403),
    (PlanNotFoundError, 404),
    (RecipeNotFoundError, 404),
    (UserNotFoundError, 404),
    (UserAlreadyExistsError, 409),
    (ConcurrencyError, 409),
    (InvalidStateError, 409),
    (ValueError, 400),
]


def response(status_code: int, body: dict | None) -> dict:
    """API Gateway レスポンス形式"""
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body, default=str) if body is not None else '',
    }


def error_response(error: Exception) -> dict:
    """例外をエラーレスポンスに変換"""
    for error_class, status_code in ERROR_STATUS:
        if isinstance(error, error_class):
            logger.warning('request_failed', status_code=status_code, error=str(error))
            return response(status_code, {'success': False, 'error': str(error)})

    logger.exception('unhandled_error', error_type=type(error).__name__)
    return response(500, {'success': False, 'error': 'Internal server error'})


def get_method(event: dict) -> str:
    http_info = event.get('requestContext', {}).get('http', {})
    return (http_info.get('method') or event.get('httpMethod') or 'GET').upper()


def get_path(event: dict) -> str:
    http_info = event.get('requestContext', {}).get('http', {})
    path = event.get('rawPath') or http_info.get('path') or event.get('path') or '/'
    return path.rstrip('/') or '/'


def match_route(pattern: str, path: str) -> dict[str, str] | None:
    """
    パスパターンに一致すればパスパラメータを返す

    例: match_route('/plans/{planId}', '/plans/abc') → {'planId': 'abc'}
    """
    regex = re.sub(r'\{(\w+)\}', r'(?P<\1>[^/]+)', pattern)
    matched = re.fullmatch(regex, path)
    return matched.groupdict() if matched else None


def parse_body(event: dict) -> dict[str, Any]:
    """リクエストボディを JSON オブジェクトとして取得"""
    raw = event.get('body')
    if not raw:
        return {}
    if event.get('isBase64Encoded'):
        raw = base64.b64decode(raw).decode('utf-8')
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise BadRequestError('Invalid JSON in request body') from e
    if not isinstance(body, dict):
        raise BadRequestError('Request body must be a JSON object')
    return body


def get_query_params(event: dict) -> dict[str, str]:
    return event.get('queryStringParameters') or {}


def get_user_id(event: dict) -> str:
    """
    認証済みユーザーIDを取得

    優先順: Cognito claims.sub → Lambda authorizer userId →
    HTTP API JWT claims.sub → 設定のデフォルトユーザー
    """
    authorizer = event.get('requestContext', {}).get('authorizer') or {}
    user_id = (
        (authorizer.get('claims') or {}).get('sub')
        or authorizer.get('userId')
        or ((authorizer.get('jwt') or {}).get('claims') or {}).get('sub')
        or get_settings().default_user_id
    )
    if not user_id:
        raise UnauthorizedError('Unauthorized')
    return user_id


def bind_request_context(event: dict, context: Any, **extra: Any) -> None:
    """ログにリクエスト情報を紐付ける"""
    ensure_logging_configured(get_settings().log_level)
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=getattr(context, 'aws_request_id', None),
        **extra,
    )


def run_async(coro: Awaitable[T]) -> T:
    """Lambda (同期) から use case を実行"""
    return asyncio.run(coro)


def handle_http(
    event: dict,
    context: Any,
    dispatch: Callable[[str, str, dict], dict],
) -> dict:
    """
    HTTP ハンドラー共通処理

    OPTIONS への応答、ログコンテキストの設定、例外のレスポンス変換を行い、
    ルーティングは dispatch(method, path, event) に委ねる。
    """
    method = get_method(event)
    path = get_path(event)
    bind_request_context(event, context, method=method, path=path)
    logger.info('request_received')

    if method == 'OPTIONS':
        return response(200, {})

    try:
        return dispatch(method, path, event)
    except Exception as e:
        return error_response(e)


def not_found() -> dict:
    return response(404, {'success': False, 'error': 'Not found'})
