"""Register User Use Case"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from mealplanner.application.ports.repositories import DuplicateItemError, IUserRepository
from mealplanner.domain.user import UserPreferences, UserProfile

logger = structlog.get_logger()


class UserAlreadyExistsError(Exception):
    """メールアドレス重複エラー"""

    pass


@dataclass
class RegisterUserInput:
    """登録入力DTO"""

    email: str
    name: str
    password: str
    dietary_restrictions: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    target_calories: int | None = None
    preferences: dict[str, Any] | None = None


@dataclass
class RegisterUserOutput:
    """登録出力DTO"""

    user_id: str
    user: dict[str, Any]


class RegisterUserUseCase:
    """
    ユーザー登録 ユースケース

    1. 入力検証とパスワードハッシュ化 (UserProfile.register)
    2. メールアドレスの重複確認 (EmailIndex)
    3. 保存（userId の条件付き書き込み）
    """

    def __init__(self, user_repository: IUserRepository):
        self._user_repo = user_repository

    async def execute(self, input_data: RegisterUserInput) -> RegisterUserOutput:
        """ユースケースを実行"""
        user = UserProfile.register(
            email=input_data.email,
            name=input_data.name,
            password=input_data.password,
            dietary_restrictions=input_data.dietary_restrictions,
            allergies=input_data.allergies,
            target_calories=input_data.target_calories,
            preferences=UserPreferences.from_dict(input_data.preferences),
        )

        existing = await self._user_repo.find_by_email(user.email)
        if existing is not None:
            logger.warning("user_registration_duplicate_email")
            raise UserAlreadyExistsError("User with this email already exists")

        try:
            await self._user_repo.save(user)
        except DuplicateItemError as e:
            raise UserAlreadyExistsError(str(e)) from e

        logger.info("user_registered", user_id=user.user_id)
        return RegisterUserOutput(user_id=user.user_id, user=user.to_dict())
