"""User Use Cases"""
from .get_user import GetUserInput, GetUserOutput, GetUserUseCase, UserNotFoundError
from .register_user import (
    RegisterUserInput,
    RegisterUserOutput,
    RegisterUserUseCase,
    UserAlreadyExistsError,
)
from .update_profile import UpdateProfileInput, UpdateProfileOutput, UpdateProfileUseCase

__all__ = [
    "GetUserInput",
    "GetUserOutput",
    "GetUserUseCase",
    "UserNotFoundError",
    "RegisterUserInput",
    "RegisterUserOutput",
    "RegisterUserUseCase",
    "UserAlreadyExistsError",
    "UpdateProfileInput",
    "UpdateProfileOutput",
    "UpdateProfileUseCase",
]
