"""DynamoDB Meal Plan Repository Implementation"""
from __future__ import annotations

from typing import Any

import boto3
import structlog
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from mealplanner.application.ports.repositories import (
    ConcurrencyError,
    DuplicateItemError,
    IMealPlanRepository,
)
from mealplanner.domain.meal_plan import MealPlan, PlanStatus

from .serialization import (
    decode_cursor,
    encode_cursor,
    from_dynamodb,
    is_conditional_check_failure,
    to_dynamodb,
)

logger = structlog.get_logger()


class DynamoDBMealPlanRepository(IMealPlanRepository):
    """
    DynamoDB ベースの Meal Plan Repository

    テーブル: pk planId, GSI UserIdIndex (userId, createdAt)
    状態遷移は `#status = :expected` を条件とする UpdateExpression で行い、
    同じイベントの重複配信による二重生成を防ぐ。
    """

    def __init__(
        self,
        table_name: str = "meal-planner-plans",
        region: str = "us-east-1",
        user_index: str = "UserIdIndex",
        table: Any = None,
    ):
        self.table_name = table_name
        self.user_index = user_index
        if table is None:
            table = boto3.resource("dynamodb", region_name=region).Table(table_name)
        self._table = table

    async def save(self, plan: MealPlan) -> None:
        """新規献立を保存"""
        log = logger.bind(plan_id=plan.plan_id)
        try:
            self._table.put_item(
                Item=to_dynamodb(plan.to_dict()),
                ConditionExpression="attribute_not_exists(planId)",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                log.warning("plan_already_exists")
                raise DuplicateItemError(f"Plan {plan.plan_id} already exists") from e
            raise
        log.info("plan_saved", status=plan.status.value)

    async def find_by_id(self, plan_id: str) -> MealPlan | None:
        """IDで献立を取得"""
        response = self._table.get_item(Key={"planId": plan_id})
        item = response.get("Item")
        if not item:
            return None
        return MealPlan.from_dict(from_dynamodb(item))

    async def find_by_user(
        self,
        user_id: str,
        limit: int = 20,
        cursor: str | None = None,
    ) -> tuple[list[MealPlan], str | None]:
        """ユーザーの献立一覧を新しい順に取得"""
        params: dict[str, Any] = {
            "IndexName": self.user_index,
            "KeyConditionExpression": Key("userId").eq(user_id),
            "ScanIndexForward": False,
            "Limit": limit,
        }
        start_key = decode_cursor(cursor)
        if start_key:
            params["ExclusiveStartKey"] = start_key

        response = self._table.query(**params)
        plans = [MealPlan.from_dict(from_dynamodb(item)) for item in response.get("Items", [])]
        logger.info("plans_retrieved", user_id=user_id, count=len(plans))

        return plans, encode_cursor(response.get("LastEvaluatedKey"))

    async def update_status(self, plan: MealPlan, expected_status: PlanStatus) -> None:
        """
        献立の状態を条件付きで書き込む

        completed では生成結果を、failed ではエラーメッセージを合わせて保存する。
        """
        log = logger.bind(plan_id=plan.plan_id, status=plan.status.value)

        assignments = ["#status = :status", "updatedAt = :updatedAt"]
        removals: list[str] = []
        names = {"#status": "status"}
        values: dict[str, Any] = {
            ":status": plan.status.value,
            ":updatedAt": plan.updated_at.isoformat(),
            ":expected": expected_status.value,
        }

        if plan.status == PlanStatus.COMPLETED:
            snapshot = plan.to_dict()
            assignments += [
                "recipes = :recipes",
                "shoppingList = :shoppingList",
                "nutritionSummary = :nutritionSummary",
                "completedAt = :completedAt",
            ]
            values[":recipes"] = snapshot.get("recipes", [])
            values[":shoppingList"] = snapshot.get("shoppingList", {})
            values[":nutritionSummary"] = snapshot.get("nutritionSummary", {})
            values[":completedAt"] = snapshot["completedAt"]
            names["#error"] = "error"
            removals.append("#error")
        elif plan.status == PlanStatus.FAILED:
            names["#error"] = "error"
            assignments.append("#error = :error")
            values[":error"] = plan.error or "Unknown error"

        expression = "SET " + ", ".join(assignments)
        if removals:
            expression += " REMOVE " + ", ".join(removals)

        try:
            self._table.update_item(
                Key={"planId": plan.plan_id},
                UpdateExpression=expression,
                ConditionExpression="#status = :expected",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=to_dynamodb(values),
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                log.warning("plan_status_conflict", expected=expected_status.value)
                raise ConcurrencyError(
                    f"Plan {plan.plan_id} is no longer {expected_status.value}"
                ) from e
            raise

        log.info("plan_status_updated", previous=expected_status.value)
