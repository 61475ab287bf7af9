"""
Dependency Container

Lambda コンテナ (ウォームスタート) 単位で boto3 クライアントと
リポジトリを1度だけ生成して使い回す。
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from mealplanner.application.ports.event_publisher import IEventPublisher
from mealplanner.application.ports.gateways import ILanguageModelGateway, InferenceConfig
from mealplanner.application.ports.repositories import (
    IMealPlanRepository,
    IRecipeRepository,
    IUserRepository,
)
from mealplanner.infrastructure.config import Settings, get_settings
from mealplanner.infrastructure.events import EventBridgePublisher
from mealplanner.infrastructure.gateways import BedrockConverseGateway
from mealplanner.infrastructure.logging_config import configure_logging
from mealplanner.infrastructure.repositories import (
    DynamoDBMealPlanRepository,
    DynamoDBRecipeRepository,
    DynamoDBUserRepository,
)


@dataclass
class Container:
    """ユースケースが依存するポートの実装一式"""

    settings: Settings
    user_repository: IUserRepository
    meal_plan_repository: IMealPlanRepository
    recipe_repository: IRecipeRepository
    language_model: ILanguageModelGateway
    event_publisher: IEventPublisher

    @property
    def plan_inference(self) -> InferenceConfig:
        return InferenceConfig(
            max_tokens=self.settings.plan_max_tokens,
            temperature=self.settings.plan_temperature,
            top_p=self.settings.plan_top_p,
        )

    @property
    def recipe_inference(self) -> InferenceConfig:
        return InferenceConfig(
            max_tokens=self.settings.recipe_max_tokens,
            temperature=self.settings.recipe_temperature,
            top_p=self.settings.recipe_top_p,
        )


def build_container(settings: Settings) -> Container:
    """設定から AWS 実装を組み立てる"""
    return Container(
        settings=settings,
        user_repository=DynamoDBUserRepository(
            table_name=settings.users_table,
            region=settings.aws_region,
            email_index=settings.users_email_index,
        ),
        meal_plan_repository=DynamoDBMealPlanRepository(
            table_name=settings.plans_table,
            region=settings.aws_region,
            user_index=settings.plans_user_index,
        ),
        recipe_repository=DynamoDBRecipeRepository(
            table_name=settings.recipes_table,
            region=settings.aws_region,
            plan_index=settings.recipes_plan_index,
        ),
        language_model=BedrockConverseGateway(
            region=settings.aws_region,
            model_id=settings.bedrock_model_id,
        ),
        event_publisher=EventBridgePublisher(
            event_bus_name=settings.event_bus_name,
            source=settings.event_source,
            region=settings.aws_region,
        ),
    )


@lru_cache()
def get_container() -> Container:
    """コンテナのシングルトンインスタンスを取得"""
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_container(settings)
