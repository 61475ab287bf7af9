"""UserProfile Entity"""
from __future__ import annotations

import base64
import hashlib
import hmac
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

DEFAULT_TARGET_CALORIES = 2000
PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 260_000


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(password: str, iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """パスワードをハッシュ化 (`pbkdf2_sha256$iterations$salt$hash`)"""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join(
        [
            PASSWORD_HASH_ALGORITHM,
            str(iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    """パスワードを検証"""
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    if algorithm != PASSWORD_HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        base64.b64decode(salt),
        int(iterations),
    )
    return hmac.compare_digest(digest, base64.b64decode(expected))


@dataclass
class UserPreferences:
    """調理の好み"""

    cuisine_types: list[str] = field(default_factory=list)
    skill_level: str = "beginner"
    cooking_time: str = "30-45 minutes"

    def to_dict(self) -> dict[str, Any]:
        return {
            "cuisineTypes": list(self.cuisine_types),
            "skillLevel": self.skill_level,
            "cookingTime": self.cooking_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> UserPreferences:
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("preferences must be an object")
        return cls(
            cuisine_types=_to_str_list(data.get("cuisineTypes"), "cuisineTypes"),
            skill_level=_optional_text(data.get("skillLevel"), "skillLevel") or "beginner",
            cooking_time=_optional_text(data.get("cookingTime"), "cookingTime") or "30-45 minutes",
        )


def _to_str_list(value: Any, name: str) -> list[str]:
    """文字列のリストに正規化 (単独の文字列は1要素として扱う)"""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValueError(f"{name} must be a list of strings")


def _optional_text(value: Any, name: str) -> str | None:
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


@dataclass
class UserProfile:
    """
    ユーザープロフィール（エンティティ）

    食事制限・アレルギー・好みを保持し、プロンプト生成の入力になる。
    password_hash は公開用の辞書には含めない。
    """

    user_id: str = field(default_factory=lambda: str(uuid4()))
    email: str | None = None
    name: str | None = None
    dietary_restrictions: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    target_calories: int | None = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
    password_hash: str | None = field(default=None, repr=False)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    # === Factory Methods ===

    @classmethod
    def register(
        cls,
        email: str,
        name: str,
        password: str,
        dietary_restrictions: list[str] | None = None,
        allergies: list[str] | None = None,
        target_calories: int | None = None,
        preferences: UserPreferences | None = None,
    ) -> UserProfile:
        """新規ユーザーを作成"""
        if not email or not name or not password:
            raise ValueError("Email, name, and password are required")
        if "@" not in email:
            raise ValueError(f"Invalid email address: {email}")
        if target_calories is not None and target_calories <= 0:
            raise ValueError("targetCalories must be positive")

        return cls(
            email=email.strip().lower(),
            name=name.strip(),
            dietary_restrictions=list(dietary_restrictions or []),
            allergies=list(allergies or []),
            target_calories=target_calories or DEFAULT_TARGET_CALORIES,
            preferences=preferences or UserPreferences(),
            password_hash=hash_password(password),
        )

    @classmethod
    def default(cls, user_id: str) -> UserProfile:
        """プロフィール未登録ユーザー用のデフォルト"""
        return cls(user_id=user_id)

    # === Command Methods ===

    def apply_update(
        self,
        name: str | None = None,
        dietary_restrictions: list[str] | None = None,
        allergies: list[str] | None = None,
        target_calories: int | None = None,
        preferences: UserPreferences | None = None,
    ) -> None:
        """指定された項目のみ更新"""
        changes = {
            "name": name,
            "dietary_restrictions": dietary_restrictions,
            "allergies": allergies,
            "target_calories": target_calories,
            "preferences": preferences,
        }
        provided = {k: v for k, v in changes.items() if v is not None}
        if not provided:
            raise ValueError("At least one field to update must be provided")

        if target_calories is not None and target_calories <= 0:
            raise ValueError("targetCalories must be positive")

        for attr, value in provided.items():
            setattr(self, attr, list(value) if isinstance(value, list) else value)
        self.updated_at = _utc_now()

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and verify_password(password, self.password_hash)

    # === Serialization ===

    def to_dict(self, include_secrets: bool = False) -> dict[str, Any]:
        """辞書に変換"""
        data: dict[str, Any] = {
            "userId": self.user_id,
            "dietaryRestrictions": list(self.dietary_restrictions),
            "allergies": list(self.allergies),
            "preferences": self.preferences.to_dict(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.email is not None:
            data["email"] = self.email
        if self.name is not None:
            data["name"] = self.name
        if self.target_calories is not None:
            data["targetCalories"] = self.target_calories
        if include_secrets and self.password_hash:
            data["passwordHash"] = self.password_hash
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        """辞書から生成"""
        return cls(
            user_id=data["userId"],
            email=data.get("email"),
            name=data.get("name"),
            dietary_restrictions=list(data.get("dietaryRestrictions") or []),
            allergies=list(data.get("allergies") or []),
            target_calories=int(data["targetCalories"])
            if data.get("targetCalories") is not None
            else None,
            preferences=UserPreferences.from_dict(data.get("preferences")),
            password_hash=data.get("passwordHash"),
            created_at=datetime.fromisoformat(data["createdAt"])
            if "createdAt" in data
            else _utc_now(),
            updated_at=datetime.fromisoformat(data["updatedAt"])
            if "updatedAt" in data
            else _utc_now(),
        )
