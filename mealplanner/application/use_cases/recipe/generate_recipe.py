"""Generate Recipe Use Case"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from mealplanner.application.ports.gateways import ILanguageModelGateway, InferenceConfig
from mealplanner.application.ports.repositories import IUserRepository
from mealplanner.application.prompts import build_recipe_system_prompt, build_recipe_user_message
from mealplanner.application.response_parser import ResponseParseError, parse_recipe
from mealplanner.domain.user import UserProfile

logger = structlog.get_logger()

RECIPE_INFERENCE = InferenceConfig(max_tokens=4096, temperature=0.7, top_p=0.9)


@dataclass
class GenerateRecipeInput:
    """レシピ生成入力DTO"""

    user_id: str
    ingredients: str
    meal_type: str | None = None
    servings: int | None = None
    additional_notes: str | None = None


@dataclass
class GenerateRecipeOutput:
    """
    レシピ生成出力DTO

    パースに失敗した場合 recipe は None となり、raw_response と warning を返す。
    """

    user_id: str
    generated_at: str
    recipe: dict[str, Any] | None = None
    raw_response: str | None = None
    warning: str | None = None


class GenerateRecipeUseCase:
    """
    レシピ生成 ユースケース (同期)

    1. ユーザープロフィールを取得（未登録ならデフォルト）
    2. Bedrock でレシピを生成
    3. JSON をパース
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        language_model: ILanguageModelGateway,
        inference_config: InferenceConfig = RECIPE_INFERENCE,
    ):
        self._user_repo = user_repository
        self._language_model = language_model
        self._inference_config = inference_config

    async def execute(self, input_data: GenerateRecipeInput) -> GenerateRecipeOutput:
        """ユースケースを実行"""
        if not input_data.ingredients or not input_data.ingredients.strip():
            raise ValueError("Ingredients are required")
        if input_data.servings is not None and input_data.servings < 1:
            raise ValueError("servings must be positive")

        log = logger.bind(user_id=input_data.user_id)

        profile = await self._user_repo.find_by_id(input_data.user_id)
        if profile is None:
            log.info("user_profile_not_found_using_default")
            profile = UserProfile.default(input_data.user_id)

        log.info("invoking_language_model", meal_type=input_data.meal_type)
        text = await self._language_model.complete(
            system_prompt=build_recipe_system_prompt(profile),
            user_message=build_recipe_user_message(
                ingredients=input_data.ingredients.strip(),
                meal_type=input_data.meal_type,
                servings=input_data.servings,
                additional_notes=input_data.additional_notes,
            ),
            config=self._inference_config,
        )
        generated_at = datetime.now(timezone.utc).isoformat()

        try:
            recipe = parse_recipe(text)
        except ResponseParseError as e:
            log.warning("recipe_parse_failed", error=str(e))
            return GenerateRecipeOutput(
                user_id=input_data.user_id,
                generated_at=generated_at,
                raw_response=text,
                warning="Response was not in expected JSON format",
            )

        log.info("recipe_generated", recipe_name=recipe.recipe_name)
        return GenerateRecipeOutput(
            user_id=input_data.user_id,
            generated_at=generated_at,
            recipe=recipe.to_dict(),
        )
