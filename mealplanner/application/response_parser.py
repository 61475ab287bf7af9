"""LLM Response Parser"""
from __future__ import annotations

import json
import re
from typing import Any

import structlog

from mealplanner.domain.meal_plan import MealPlanResult
from mealplanner.domain.recipe import RecipeDetails

logger = structlog.get_logger()

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class ResponseParseError(Exception):
    """LLM 出力のパースエラー"""

    pass


def extract_json(text: str) -> Any:
    """
    LLM 出力から JSON を取り出す

    「JSON のみ返す」指示があっても、モデルはコードフェンスや前置きを
    付けることがあるため、以下の順に試す:
    1. そのまま
    2. ```json ... ``` の中身
    3. 最初の { / [ から対応する最後の } / ] まで
    """
    if not text or not text.strip():
        raise ResponseParseError("Empty response from language model")

    candidates = [text.strip()]

    fenced = _CODE_FENCE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if starts:
        start = min(starts)
        end = max(text.rfind("}"), text.rfind("]"))
        if end > start:
            candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise ResponseParseError("Response was not in expected JSON format")


def parse_meal_plan(text: str) -> MealPlanResult:
    """献立 JSON をパース (`{"days": [...]}` または日の配列)"""
    data = extract_json(text)

    if isinstance(data, list):
        data = {"days": data}
    if not isinstance(data, dict) or not isinstance(data.get("days"), list):
        raise ResponseParseError("Meal plan response does not contain a list of days")

    try:
        result = MealPlanResult.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise ResponseParseError(f"Invalid meal plan structure: {e}") from e

    if not result.days or result.meal_count == 0:
        raise ResponseParseError("Meal plan response contains no meals")

    logger.info(
        "meal_plan_parsed",
        day_count=len(result.days),
        meal_count=result.meal_count,
    )
    return result


def parse_recipe(text: str) -> RecipeDetails:
    """レシピ JSON をパース"""
    data = extract_json(text)
    if isinstance(data, dict) and isinstance(data.get("recipe"), dict):
        data = data["recipe"]

    try:
        return RecipeDetails.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise ResponseParseError(f"Invalid recipe structure: {e}") from e
