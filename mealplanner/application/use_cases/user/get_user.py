"""Get User Use Case"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from mealplanner.application.ports.repositories import IUserRepository

logger = structlog.get_logger()


class UserNotFoundError(Exception):
    """ユーザーが見つからないエラー"""

    pass


@dataclass
class GetUserInput:
    """取得入力DTO"""

    user_id: str


@dataclass
class GetUserOutput:
    """取得出力DTO (passwordHash は含まない)"""

    user: dict[str, Any]


class GetUserUseCase:
    """ユーザー取得 ユースケース"""

    def __init__(self, user_repository: IUserRepository):
        self._user_repo = user_repository

    async def execute(self, input_data: GetUserInput) -> GetUserOutput:
        """ユースケースを実行"""
        user = await self._user_repo.find_by_id(input_data.user_id)
        if user is None:
            logger.warning("user_not_found", user_id=input_data.user_id)
            raise UserNotFoundError(f"User {input_data.user_id} not found")

        return GetUserOutput(user=user.to_dict())
