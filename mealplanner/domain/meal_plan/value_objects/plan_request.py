"""Plan Request Value Object"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 14
MIN_MEALS_PER_DAY = 1
MAX_MEALS_PER_DAY = 6


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


@dataclass(frozen=True)
class PlanRequest:
    """
    献立生成リクエスト（値オブジェクト）

    API で受け付けた生成条件。イベントの detail としてそのまま worker に渡る。
    """

    plan_type: str = "weekly"
    dietary_goal: str | None = None
    start_date: str = field(default_factory=_today)
    duration: int = 7
    meals_per_day: int = 3
    additional_requirements: str | None = None

    def __post_init__(self) -> None:
        """バリデーション"""
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self.plan_type, str) or not self.plan_type.strip():
            raise ValueError("planType must not be empty")

        if not MIN_DURATION_DAYS <= self.duration <= MAX_DURATION_DAYS:
            raise ValueError(
                f"Invalid duration: {self.duration}. "
                f"Must be between {MIN_DURATION_DAYS} and {MAX_DURATION_DAYS} days"
            )

        if not MIN_MEALS_PER_DAY <= self.meals_per_day <= MAX_MEALS_PER_DAY:
            raise ValueError(
                f"Invalid mealsPerDay: {self.meals_per_day}. "
                f"Must be between {MIN_MEALS_PER_DAY} and {MAX_MEALS_PER_DAY}"
            )

        try:
            date.fromisoformat(self.start_date)
        except (TypeError, ValueError):
            raise ValueError(
                f"Invalid startDate: {self.start_date}. Expected YYYY-MM-DD"
            ) from None

    @property
    def total_meals(self) -> int:
        """生成される食事の総数"""
        return self.duration * self.meals_per_day

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換 (None の項目は含めない)"""
        data: dict[str, Any] = {
            "planType": self.plan_type,
            "startDate": self.start_date,
            "duration": self.duration,
            "mealsPerDay": self.meals_per_day,
        }
        if self.dietary_goal:
            data["dietaryGoal"] = self.dietary_goal
        if self.additional_requirements:
            data["additionalRequirements"] = self.additional_requirements
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlanRequest:
        """辞書から生成 (未指定の項目はデフォルト値)"""
        kwargs: dict[str, Any] = {}
        if data.get("planType"):
            kwargs["plan_type"] = _to_str(data["planType"], "planType")
        if data.get("dietaryGoal"):
            kwargs["dietary_goal"] = _to_str(data["dietaryGoal"], "dietaryGoal")
        if data.get("startDate"):
            kwargs["start_date"] = _to_str(data["startDate"], "startDate")
        if data.get("duration") is not None:
            kwargs["duration"] = _to_int(data["duration"], "duration")
        if data.get("mealsPerDay") is not None:
            kwargs["meals_per_day"] = _to_int(data["mealsPerDay"], "mealsPerDay")
        if data.get("additionalRequirements"):
            kwargs["additional_requirements"] = _to_str(
                data["additionalRequirements"], "additionalRequirements"
            )
        return cls(**kwargs)


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _to_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value
