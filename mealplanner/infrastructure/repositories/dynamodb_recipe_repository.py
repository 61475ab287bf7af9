"""DynamoDB Recipe Repository Implementation"""
from __future__ import annotations

from typing import Any

import boto3
import structlog
from boto3.dynamodb.conditions import Key

from mealplanner.application.ports.repositories import IRecipeRepository
from mealplanner.domain.recipe import SavedRecipe

from .serialization import from_dynamodb, to_dynamodb

logger = structlog.get_logger()


class DynamoDBRecipeRepository(IRecipeRepository):
    """
    DynamoDB ベースの Recipe Repository

    テーブル: pk userId, sk recipeId, GSI PlanIdIndex (planId, day)
    献立由来のレシピは決定的な recipeId を持つため、再生成時は上書きになる。
    """

    def __init__(
        self,
        table_name: str = "meal-planner-recipes",
        region: str = "us-east-1",
        plan_index: str = "PlanIdIndex",
        table: Any = None,
    ):
        self.table_name = table_name
        self.plan_index = plan_index
        if table is None:
            table = boto3.resource("dynamodb", region_name=region).Table(table_name)
        self._table = table

    async def save(self, recipe: SavedRecipe) -> None:
        """レシピを保存"""
        self._table.put_item(Item=to_dynamodb(recipe.to_dict()))
        logger.info("recipe_saved", user_id=recipe.user_id, recipe_id=recipe.recipe_id)

    async def save_batch(self, recipes: list[SavedRecipe]) -> None:
        """レシピをバッチ保存 (25件単位の分割と未処理分の再送は batch_writer が行う)"""
        if not recipes:
            return
        with self._table.batch_writer(overwrite_by_pkeys=["userId", "recipeId"]) as batch:
            for recipe in recipes:
                batch.put_item(Item=to_dynamodb(recipe.to_dict()))
        logger.info("recipes_batch_saved", count=len(recipes))

    async def find(self, user_id: str, recipe_id: str) -> SavedRecipe | None:
        """レシピを取得"""
        response = self._table.get_item(Key={"userId": user_id, "recipeId": recipe_id})
        item = response.get("Item")
        return SavedRecipe.from_dict(from_dynamodb(item)) if item else None

    async def find_by_user(self, user_id: str, limit: int = 100) -> list[SavedRecipe]:
        """ユーザーのレシピ一覧を新しい順に取得

        ソートキーは recipeId のため、全件を読んでから createdAt で並べて limit 件に絞る。
        """
        items: list[dict[str, Any]] = []
        params: dict[str, Any] = {"KeyConditionExpression": Key("userId").eq(user_id)}
        while True:
            response = self._table.query(**params)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        recipes = [SavedRecipe.from_dict(from_dynamodb(i)) for i in items]
        recipes.sort(key=lambda r: r.created_at, reverse=True)
        return recipes[:limit]

    async def find_by_plan(self, plan_id: str) -> list[SavedRecipe]:
        """献立のレシピ一覧を日付順に取得"""
        items: list[dict[str, Any]] = []
        params: dict[str, Any] = {
            "IndexName": self.plan_index,
            "KeyConditionExpression": Key("planId").eq(plan_id),
        }
        while True:
            response = self._table.query(**params)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        return [SavedRecipe.from_dict(from_dynamodb(i)) for i in items]

    async def delete(self, user_id: str, recipe_id: str) -> bool:
        """レシピを削除 (存在しなかった場合は False)"""
        response = self._table.delete_item(
            Key={"userId": user_id, "recipeId": recipe_id},
            ReturnValues="ALL_OLD",
        )
        deleted = bool(response.get("Attributes"))
        logger.info("recipe_delete_attempted", recipe_id=recipe_id, deleted=deleted)
        return deleted
