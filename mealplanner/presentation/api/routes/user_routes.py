"""User API Routes"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mealplanner.application.use_cases.user import (
    GetUserInput,
    GetUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from mealplanner.presentation.api.dependencies import ContainerDep

router = APIRouter()


# === Request/Response Models ===


class RegisterRequest(BaseModel):
    """ユーザー登録リクエスト"""

    email: str
    name: str
    password: str = Field(repr=False)
    dietaryRestrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    targetCalories: int | None = None
    preferences: dict[str, Any] | None = None


class UpdateProfileRequest(BaseModel):
    """プロフィール更新リクエスト (指定した項目のみ更新)"""

    name: str | None = None
    dietaryRestrictions: list[str] | None = None
    allergies: list[str] | None = None
    targetCalories: int | None = None
    preferences: dict[str, Any] | None = None


class UserResponse(BaseModel):
    success: bool = True
    message: str | None = None
    user: dict[str, Any]


# === Routes ===


@router.post("", response_model=UserResponse, status_code=201)
async def register_user(body: RegisterRequest, container: ContainerDep) -> UserResponse:
    """ユーザー登録"""
    use_case = RegisterUserUseCase(user_repository=container.user_repository)
    result = await use_case.execute(
        RegisterUserInput(
            email=body.email,
            name=body.name,
            password=body.password,
            dietary_restrictions=body.dietaryRestrictions,
            allergies=body.allergies,
            target_calories=body.targetCalories,
            preferences=body.preferences,
        )
    )
    return UserResponse(message="User registered successfully", user=result.user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, container: ContainerDep) -> UserResponse:
    """プロフィール取得"""
    use_case = GetUserUseCase(user_repository=container.user_repository)
    result = await use_case.execute(GetUserInput(user_id=user_id))
    return UserResponse(user=result.user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_profile(
    user_id: str,
    body: UpdateProfileRequest,
    container: ContainerDep,
) -> UserResponse:
    """プロフィール更新"""
    use_case = UpdateProfileUseCase(user_repository=container.user_repository)
    result = await use_case.execute(
        UpdateProfileInput(
            user_id=user_id,
            name=body.name,
            dietary_restrictions=body.dietaryRestrictions,
            allergies=body.allergies,
            target_calories=body.targetCalories,
            preferences=body.preferences,
        )
    )
    return UserResponse(message="Profile updated successfully", user=result.user)
