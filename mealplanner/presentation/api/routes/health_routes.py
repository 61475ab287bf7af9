"""Health Check Routes"""
from fastapi import APIRouter

from mealplanner.presentation.api.dependencies import ContainerDep

router = APIRouter()


@router.get("/health")
async def health_check(container: ContainerDep) -> dict:
    """ヘルスチェック"""
    settings = container.settings
    return {
        "status": "healthy",
        "service": settings.service_name,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check(container: ContainerDep) -> dict:
    """レディネスチェック (接続先の設定値を返す)"""
    settings = container.settings
    return {
        "status": "ready",
        "checks": {
            "users_table": settings.users_table,
            "plans_table": settings.plans_table,
            "recipes_table": settings.recipes_table,
            "event_bus": settings.event_bus_name,
            "bedrock_model": settings.bedrock_model_id,
        },
    }
