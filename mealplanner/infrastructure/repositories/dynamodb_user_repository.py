"""DynamoDB User Repository Implementation"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import boto3
import structlog
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from mealplanner.application.ports.repositories import (
    ConcurrencyError,
    DuplicateItemError,
    IUserRepository,
)
from mealplanner.domain.user import UserProfile

from .serialization import from_dynamodb, is_conditional_check_failure, to_dynamodb

logger = structlog.get_logger()


class DynamoDBUserRepository(IUserRepository):
    """
    DynamoDB ベースの User Repository

    テーブル: pk userId, GSI EmailIndex (email)
    """

    def __init__(
        self,
        table_name: str = "meal-planner-users",
        region: str = "us-east-1",
        email_index: str = "EmailIndex",
        table: Any = None,
    ):
        self.table_name = table_name
        self.email_index = email_index
        if table is None:
            table = boto3.resource("dynamodb", region_name=region).Table(table_name)
        self._table = table

    async def find_by_id(self, user_id: str) -> UserProfile | None:
        """IDでユーザーを取得"""
        response = self._table.get_item(Key={"userId": user_id})
        item = response.get("Item")
        if not item:
            logger.info("user_not_found", user_id=user_id)
            return None
        return UserProfile.from_dict(from_dynamodb(item))

    async def find_by_email(self, email: str) -> UserProfile | None:
        """
        メールアドレスでユーザーを取得

        GSI の射影に依存しないよう、キーだけ取得してから本体を読む。
        """
        response = self._table.query(
            IndexName=self.email_index,
            KeyConditionExpression=Key("email").eq(email.strip().lower()),
            Limit=1,
        )
        items = response.get("Items", [])
        if not items:
            return None
        return await self.find_by_id(items[0]["userId"])

    async def save(self, user: UserProfile) -> None:
        """新規ユーザーを保存"""
        log = logger.bind(user_id=user.user_id)
        try:
            self._table.put_item(
                Item=to_dynamodb(user.to_dict(include_secrets=True)),
                ConditionExpression="attribute_not_exists(userId)",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                log.warning("user_already_exists")
                raise DuplicateItemError(f"User {user.user_id} already exists") from e
            raise
        log.info("user_saved")

    async def update(self, user: UserProfile) -> UserProfile:
        """プロフィール項目を更新 (email / passwordHash は変更しない)"""
        user.updated_at = datetime.now(timezone.utc)
        values: dict[str, Any] = {
            ":dietaryRestrictions": list(user.dietary_restrictions),
            ":allergies": list(user.allergies),
            ":preferences": user.preferences.to_dict(),
            ":updatedAt": user.updated_at.isoformat(),
        }
        assignments = [
            "dietaryRestrictions = :dietaryRestrictions",
            "allergies = :allergies",
            "preferences = :preferences",
            "updatedAt = :updatedAt",
        ]
        names = {}
        if user.name is not None:
            # name は予約語
            names["#name"] = "name"
            assignments.append("#name = :name")
            values[":name"] = user.name
        if user.target_calories is not None:
            assignments.append("targetCalories = :targetCalories")
            values[":targetCalories"] = user.target_calories

        params: dict[str, Any] = {
            "Key": {"userId": user.user_id},
            "UpdateExpression": "SET " + ", ".join(assignments),
            "ConditionExpression": "attribute_exists(userId)",
            "ExpressionAttributeValues": to_dynamodb(values),
            "ReturnValues": "ALL_NEW",
        }
        if names:
            params["ExpressionAttributeNames"] = names

        try:
            response = self._table.update_item(**params)
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise ConcurrencyError(f"User {user.user_id} no longer exists") from e
            raise

        logger.info("user_updated", user_id=user.user_id)
        attributes = response.get("Attributes")
        return UserProfile.from_dict(from_dynamodb(attributes)) if attributes else user
