"""EventBridge Event Publisher Implementation"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from mealplanner.application.ports.event_publisher import EventPublishError, IEventPublisher

if TYPE_CHECKING:
    from mealplanner.domain.meal_plan.events import DomainEvent

logger = structlog.get_logger()

# PutEvents の1リクエストあたりの上限
MAX_ENTRIES_PER_REQUEST = 10


class EventBridgePublisher(IEventPublisher):
    """
    EventBridge Event Publisher

    ドメインイベントを DetailType = event.detail_type として発行する。
    配信・リトライは EventBridge ルール側に委ねる。
    """

    def __init__(
        self,
        event_bus_name: str = "meal-planner-events",
        source: str = "meal-planner.business-api",
        region: str = "us-east-1",
        client: Any = None,
    ):
        self.event_bus_name = event_bus_name
        self.source = source
        self._client = client or boto3.client("events", region_name=region)

    async def publish(self, event: "DomainEvent") -> None:
        """イベントを発行"""
        await self.publish_batch([event])

    async def publish_batch(self, events: list["DomainEvent"]) -> None:
        """イベントをバッチ発行"""
        if not events:
            return

        entries = [self._to_entry(e) for e in events]
        for i in range(0, len(entries), MAX_ENTRIES_PER_REQUEST):
            chunk = entries[i : i + MAX_ENTRIES_PER_REQUEST]
            try:
                response = self._client.put_events(Entries=chunk)
            except (ClientError, BotoCoreError) as e:
                logger.error("event_publish_failed", error=str(e))
                raise EventPublishError(f"Failed to publish events: {e}") from e

            failed = response.get("FailedEntryCount", 0)
            if failed:
                errors = [
                    r.get("ErrorMessage") or r.get("ErrorCode")
                    for r in response.get("Entries", [])
                    if r.get("ErrorCode")
                ]
                logger.error("event_publish_partially_failed", failed=failed, errors=errors)
                raise EventPublishError(f"{failed} event(s) were not published: {errors}")

        logger.info(
            "events_published",
            count=len(entries),
            event_types=sorted({e.event_type for e in events}),
            event_ids=[str(e.event_id) for e in events],
        )

    def _to_entry(self, event: "DomainEvent") -> dict[str, Any]:
        return {
            "Source": self.source,
            "DetailType": event.detail_type,
            "Detail": json.dumps(event.to_detail()),
            "EventBusName": self.event_bus_name,
            "Time": event.occurred_at,
        }
