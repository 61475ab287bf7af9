"""Meal Plan Domain Events"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """ドメインイベント基底クラス"""

    detail_type: ClassVar[str] = ""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utc_now)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_detail(self) -> dict[str, Any]:
        """EventBridge の detail に変換"""
        raise NotImplementedError


@dataclass(frozen=True)
class PlanGenerationRequested(DomainEvent):
    """献立生成リクエストイベント (worker の起動トリガー)"""

    detail_type: ClassVar[str] = "plan.generate.requested"

    plan_id: str = ""
    user_id: str = ""
    request: dict[str, Any] = field(default_factory=dict)

    def to_detail(self) -> dict[str, Any]:
        return {"planId": self.plan_id, "userId": self.user_id, **self.request}


@dataclass(frozen=True)
class PlanGenerationStarted(DomainEvent):
    """献立生成開始イベント"""

    detail_type: ClassVar[str] = "plan.generate.started"

    plan_id: str = ""
    user_id: str = ""

    def to_detail(self) -> dict[str, Any]:
        return {"planId": self.plan_id, "userId": self.user_id}


@dataclass(frozen=True)
class PlanGenerationCompleted(DomainEvent):
    """献立生成完了イベント"""

    detail_type: ClassVar[str] = "plan.generate.completed"

    plan_id: str = ""
    user_id: str = ""
    day_count: int = 0
    recipe_count: int = 0

    def to_detail(self) -> dict[str, Any]:
        return {
            "planId": self.plan_id,
            "userId": self.user_id,
            "dayCount": self.day_count,
            "recipeCount": self.recipe_count,
        }


@dataclass(frozen=True)
class PlanGenerationFailed(DomainEvent):
    """献立生成失敗イベント"""

    detail_type: ClassVar[str] = "plan.generate.failed"

    plan_id: str = ""
    user_id: str = ""
    reason: str = ""

    def to_detail(self) -> dict[str, Any]:
        return {"planId": self.plan_id, "userId": self.user_id, "reason": self.reason}
