"""API Dependencies"""
from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Header, HTTPException

from mealplanner.infrastructure.container import Container, get_container

logger = structlog.get_logger()


def get_app_container() -> Container:
    """依存コンテナの依存性注入 (テストでは dependency_overrides で差し替える)"""
    return get_container()


def get_current_user_id(
    container: Annotated[Container, Depends(get_app_container)],
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    呼び出し元ユーザーID

    ローカル開発用に X-User-Id ヘッダーで指定し、無ければ設定のデフォルトを使う。
    """
    user_id = x_user_id or container.settings.default_user_id
    if not user_id:
        logger.warning("user_id_missing")
        raise HTTPException(status_code=401, detail="Unauthorized")
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id


ContainerDep = Annotated[Container, Depends(get_app_container)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]
