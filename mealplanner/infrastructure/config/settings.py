"""Application Settings"""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    アプリケーション設定

    12-Factor App の Config 原則に従い、
    すべての設定は環境変数 (MEALPLANNER_*) から取得する。
    """

    # Service
    service_name: str = "meal-planner"
    environment: str = "development"
    log_level: str = "INFO"

    # AWS
    aws_region: str = "us-east-1"

    # DynamoDB
    users_table: str = "meal-planner-users"
    plans_table: str = "meal-planner-plans"
    recipes_table: str = "meal-planner-recipes"
    users_email_index: str = "EmailIndex"
    plans_user_index: str = "UserIdIndex"
    recipes_plan_index: str = "PlanIdIndex"

    # EventBridge
    event_bus_name: str = "meal-planner-events"
    event_source: str = "meal-planner.business-api"

    # Bedrock
    bedrock_model_id: str = "anthropic.claude-3-5-sonnet-20241022-v2:0"
    plan_max_tokens: int = 8192
    plan_temperature: float = 0.8
    plan_top_p: float = 0.9
    recipe_max_tokens: int = 4096
    recipe_temperature: float = 0.7
    recipe_top_p: float = 0.9

    # API
    default_user_id: str = ""
    plan_list_default_limit: int = 20
    plan_list_max_limit: int = 100

    class Config:
        env_prefix = "MEALPLANNER_"
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """設定のシングルトンインスタンスを取得"""
    return Settings()
