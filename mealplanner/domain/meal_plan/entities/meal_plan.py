"""MealPlan Aggregate Root"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..events.meal_plan_events import (
    DomainEvent,
    PlanGenerationCompleted,
    PlanGenerationFailed,
    PlanGenerationRequested,
    PlanGenerationStarted,
)
from ..value_objects.meal_plan_day import MealPlanDay, MealPlanResult
from ..value_objects.plan_request import PlanRequest


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlanStatus(str, Enum):
    """献立ステータス"""

    REQUESTED = "requested"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


# 遷移元 → 遷移先
ALLOWED_TRANSITIONS: dict[PlanStatus, frozenset[PlanStatus]] = {
    PlanStatus.REQUESTED: frozenset({PlanStatus.GENERATING, PlanStatus.FAILED}),
    # GENERATING → GENERATING はタイムアウト後の再配信
    PlanStatus.GENERATING: frozenset(
        {PlanStatus.GENERATING, PlanStatus.COMPLETED, PlanStatus.FAILED}
    ),
    PlanStatus.FAILED: frozenset({PlanStatus.GENERATING, PlanStatus.FAILED}),
    PlanStatus.COMPLETED: frozenset(),
}


class InvalidStateError(Exception):
    """不正な状態遷移エラー"""

    pass


def generate_plan_id(user_id: str, now: datetime | None = None) -> str:
    """`plan-{userId}-{epoch millis}` 形式の献立IDを生成"""
    now = now or _utc_now()
    return f"plan-{user_id}-{int(now.timestamp() * 1000)}"


@dataclass
class MealPlan:
    """
    献立（集約ルート）

    requested → generating → completed / failed のライフサイクルを管理する。
    状態変更はドメインイベントとして記録し、リポジトリ保存後に発行する。
    """

    plan_id: str = ""
    user_id: str = ""
    request: PlanRequest = field(default_factory=PlanRequest)
    status: PlanStatus = PlanStatus.REQUESTED
    days: list[MealPlanDay] = field(default_factory=list)
    shopping_list: dict[str, list[str]] = field(default_factory=dict)
    nutrition_summary: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime | None = None

    _uncommitted_events: list[DomainEvent] = field(default_factory=list, repr=False)

    # === Factory Methods ===

    @classmethod
    def request_generation(
        cls,
        user_id: str,
        request: PlanRequest,
        now: datetime | None = None,
    ) -> MealPlan:
        """新しい献立生成リクエストを作成"""
        if not user_id:
            raise ValueError("userId is required")

        now = now or _utc_now()
        plan = cls(
            plan_id=generate_plan_id(user_id, now),
            user_id=user_id,
            request=request,
            created_at=now,
            updated_at=now,
        )
        plan._apply(
            PlanGenerationRequested(
                occurred_at=now,
                plan_id=plan.plan_id,
                user_id=user_id,
                request=request.to_dict(),
            )
        )
        return plan

    # === Command Methods ===

    def start_generation(self) -> None:
        """生成を開始"""
        self._ensure_transition(PlanStatus.GENERATING)
        self._apply(PlanGenerationStarted(plan_id=self.plan_id, user_id=self.user_id))

    def complete(self, result: MealPlanResult) -> None:
        """生成結果を反映して完了"""
        self._ensure_transition(PlanStatus.COMPLETED)
        if not result.days:
            raise ValueError("Cannot complete a meal plan without any days")

        self.days = list(result.days)
        self.shopping_list = dict(result.shopping_list)
        self.nutrition_summary = dict(result.nutrition_summary)
        self._apply(
            PlanGenerationCompleted(
                plan_id=self.plan_id,
                user_id=self.user_id,
                day_count=len(result.days),
                recipe_count=result.meal_count,
            )
        )

    def fail(self, reason: str) -> None:
        """生成を失敗"""
        self._ensure_transition(PlanStatus.FAILED)
        self._apply(
            PlanGenerationFailed(
                plan_id=self.plan_id,
                user_id=self.user_id,
                reason=reason or "Unknown error",
            )
        )

    def can_transition_to(self, status: PlanStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    def _ensure_transition(self, target: PlanStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStateError(
                f"Cannot move plan {self.plan_id} from {self.status.value} "
                f"to {target.value}"
            )

    # === Event Handling ===

    def _apply(self, event: DomainEvent) -> None:
        """イベントを適用"""
        self._when(event)
        self._uncommitted_events.append(event)

    def _when(self, event: DomainEvent) -> None:
        """イベントハンドラ（状態遷移）"""
        handler = getattr(self, f"_on_{self._to_snake_case(type(event).__name__)}", None)
        if handler:
            handler(event)

    @staticmethod
    def _to_snake_case(name: str) -> str:
        """CamelCase → snake_case"""
        s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()

    def _on_plan_generation_requested(self, event: PlanGenerationRequested) -> None:
        self.status = PlanStatus.REQUESTED

    def _on_plan_generation_started(self, event: PlanGenerationStarted) -> None:
        self.status = PlanStatus.GENERATING
        self.updated_at = event.occurred_at

    def _on_plan_generation_completed(self, event: PlanGenerationCompleted) -> None:
        self.status = PlanStatus.COMPLETED
        self.error = None
        self.updated_at = event.occurred_at
        self.completed_at = event.occurred_at

    def _on_plan_generation_failed(self, event: PlanGenerationFailed) -> None:
        self.status = PlanStatus.FAILED
        self.error = event.reason
        self.updated_at = event.occurred_at

    def get_uncommitted_events(self) -> list[DomainEvent]:
        """未コミットのイベントを取得"""
        return self._uncommitted_events.copy()

    def mark_events_as_committed(self) -> None:
        """イベントをコミット済みとしてマーク"""
        self._uncommitted_events.clear()

    # === Queries ===

    @property
    def is_finished(self) -> bool:
        return self.status in (PlanStatus.COMPLETED, PlanStatus.FAILED)

    @property
    def recipe_count(self) -> int:
        return sum(len(d.meals) for d in self.days)

    # === Serialization ===

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換 (API レスポンス / DynamoDB アイテム共通)"""
        data: dict[str, Any] = {
            "planId": self.plan_id,
            "userId": self.user_id,
            **self.request.to_dict(),
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.days:
            data["recipes"] = [d.to_dict() for d in self.days]
        if self.shopping_list:
            data["shoppingList"] = {k: list(v) for k, v in self.shopping_list.items()}
        if self.nutrition_summary:
            data["nutritionSummary"] = dict(self.nutrition_summary)
        if self.error:
            data["error"] = self.error
        if self.completed_at:
            data["completedAt"] = self.completed_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealPlan:
        """辞書から生成"""
        return cls(
            plan_id=data["planId"],
            user_id=data["userId"],
            request=PlanRequest.from_dict(data),
            status=PlanStatus(data.get("status", PlanStatus.REQUESTED.value)),
            days=[
                MealPlanDay.from_dict(d, default_day=i)
                for i, d in enumerate(data.get("recipes") or [], start=1)
            ],
            shopping_list={k: list(v) for k, v in (data.get("shoppingList") or {}).items()},
            nutrition_summary=dict(data.get("nutritionSummary") or {}),
            error=data.get("error"),
            created_at=datetime.fromisoformat(data["createdAt"])
            if "createdAt" in data
            else _utc_now(),
            updated_at=datetime.fromisoformat(data["updatedAt"])
            if "updatedAt" in data
            else _utc_now(),
            completed_at=datetime.fromisoformat(data["completedAt"])
            if data.get("completedAt")
            else None,
        )
