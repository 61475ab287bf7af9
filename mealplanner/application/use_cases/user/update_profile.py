"""Update Profile Use Case"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from mealplanner.application.ports.repositories import IUserRepository
from mealplanner.domain.user import UserPreferences

from .get_user import UserNotFoundError

logger = structlog.get_logger()


@dataclass
class UpdateProfileInput:
    """更新入力DTO (None の項目は変更しない)"""

    user_id: str
    name: str | None = None
    dietary_restrictions: list[str] | None = None
    allergies: list[str] | None = None
    target_calories: int | None = None
    preferences: dict[str, Any] | None = None


@dataclass
class UpdateProfileOutput:
    """更新出力DTO"""

    user: dict[str, Any]


class UpdateProfileUseCase:
    """プロフィール更新 ユースケース"""

    def __init__(self, user_repository: IUserRepository):
        self._user_repo = user_repository

    async def execute(self, input_data: UpdateProfileInput) -> UpdateProfileOutput:
        """ユースケースを実行"""
        user = await self._user_repo.find_by_id(input_data.user_id)
        if user is None:
            raise UserNotFoundError(f"User {input_data.user_id} not found")

        preferences = None
        if input_data.preferences is not None:
            # 未指定のキーは現在値を維持
            merged = {**user.preferences.to_dict(), **input_data.preferences}
            preferences = UserPreferences.from_dict(merged)

        user.apply_update(
            name=input_data.name,
            dietary_restrictions=input_data.dietary_restrictions,
            allergies=input_data.allergies,
            target_calories=input_data.target_calories,
            preferences=preferences,
        )
        updated = await self._user_repo.update(user)

        logger.info("user_profile_updated", user_id=user.user_id)
        return UpdateProfileOutput(user=updated.to_dict())
