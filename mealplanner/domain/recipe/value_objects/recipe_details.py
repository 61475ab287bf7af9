"""Recipe Details Value Objects"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ingredient:
    """材料"""

    item: str
    quantity: str = ""
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"item": self.item, "quantity": self.quantity}
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> Ingredient:
        """辞書から生成 (文字列のみの材料も許容)"""
        if isinstance(data, str):
            return cls(item=data)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid ingredient: {data!r}")
        # 手動保存レシピは name/unit 形式で送られてくる
        item = _to_text(data.get("item") or data.get("name") or "")
        quantity = str(data.get("quantity", "") or "")
        unit = data.get("unit")
        if unit:
            quantity = f"{quantity} {unit}".strip()
        return cls(item=item, quantity=quantity, notes=data.get("notes") or None)


@dataclass(frozen=True)
class RecipeInstruction:
    """調理手順"""

    step: int
    instruction: str

    def to_dict(self) -> dict[str, Any]:
        return {"step": self.step, "instruction": self.instruction}


@dataclass(frozen=True)
class NutritionalInfo:
    """1人前あたりの栄養情報"""

    calories: float = 0
    protein: str = ""
    carbohydrates: str = ""
    fat: str = ""
    fiber: str | None = None
    sodium: str | None = None

    def to_dict(self) -> dict[str, Any]:
        per_serving: dict[str, Any] = {
            "calories": self.calories,
            "protein": self.protein,
            "carbohydrates": self.carbohydrates,
            "fat": self.fat,
        }
        if self.fiber is not None:
            per_serving["fiber"] = self.fiber
        if self.sodium is not None:
            per_serving["sodium"] = self.sodium
        return {"perServing": per_serving}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> NutritionalInfo:
        """`{"perServing": {...}}` とフラット形式の両方を受け付ける"""
        if not data:
            return cls()
        values = data.get("perServing", data) if isinstance(data, dict) else None
        if not isinstance(values, dict):
            raise ValueError("nutritionalInfo must be a JSON object")
        return cls(
            calories=_to_number(values.get("calories", 0)),
            protein=_to_text(values.get("protein", "")),
            carbohydrates=_to_text(values.get("carbohydrates", "")),
            fat=_to_text(values.get("fat", "")),
            fiber=_to_text(values["fiber"]) if values.get("fiber") is not None else None,
            sodium=_to_text(values["sodium"]) if values.get("sodium") is not None else None,
        )


@dataclass(frozen=True)
class DietaryCompliance:
    """食事制限への適合情報"""

    suitable: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"suitable": list(self.suitable), "warnings": list(self.warnings)}


@dataclass(frozen=True)
class RecipeDetails:
    """
    レシピ本体（値オブジェクト）

    LLM の出力と手動保存の両方から生成されるため、
    from_dict は必須項目 (recipeName) 以外を寛容に扱う。
    """

    recipe_name: str
    description: str = ""
    prep_time: str = ""
    cook_time: str = ""
    total_time: str = ""
    servings: int = 1
    difficulty: str = ""
    ingredients: tuple[Ingredient, ...] = ()
    instructions: tuple[RecipeInstruction, ...] = ()
    nutritional_info: NutritionalInfo = field(default_factory=NutritionalInfo)
    dietary_compliance: DietaryCompliance | None = None
    tips: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.recipe_name or not self.recipe_name.strip():
            raise ValueError("recipeName is required")
        if self.servings < 1:
            raise ValueError(f"servings must be positive, got {self.servings}")

    @property
    def ingredient_names(self) -> list[str]:
        return [i.item for i in self.ingredients]

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換 (API / DynamoDB 共通の camelCase)"""
        data: dict[str, Any] = {
            "recipeName": self.recipe_name,
            "description": self.description,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "totalTime": self.total_time,
            "servings": self.servings,
            "difficulty": self.difficulty,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "instructions": [s.to_dict() for s in self.instructions],
            "nutritionalInfo": self.nutritional_info.to_dict(),
            "tags": list(self.tags),
        }
        if self.dietary_compliance is not None:
            data["dietaryCompliance"] = self.dietary_compliance.to_dict()
        if self.tips:
            data["tips"] = list(self.tips)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecipeDetails:
        """辞書から生成"""
        if not isinstance(data, dict):
            raise ValueError("recipe must be a JSON object")

        compliance = data.get("dietaryCompliance")
        return cls(
            recipe_name=str(data.get("recipeName") or data.get("name") or ""),
            description=_to_text(data.get("description", "")),
            prep_time=_to_duration(data.get("prepTime", "")),
            cook_time=_to_duration(data.get("cookTime", "")),
            total_time=_to_duration(data.get("totalTime", "")),
            servings=int(_to_number(data.get("servings", 1)) or 1),
            difficulty=_to_text(data.get("difficulty", "")),
            ingredients=tuple(
                Ingredient.from_dict(i) for i in _to_list(data.get("ingredients"), "ingredients")
            ),
            instructions=_parse_instructions(_to_list(data.get("instructions"), "instructions")),
            nutritional_info=NutritionalInfo.from_dict(data.get("nutritionalInfo")),
            dietary_compliance=DietaryCompliance(
                suitable=_to_texts(compliance.get("suitable"), "suitable"),
                warnings=_to_texts(compliance.get("warnings"), "warnings"),
            )
            if isinstance(compliance, dict)
            else None,
            tips=_to_texts(data.get("tips"), "tips"),
            tags=_to_texts(data.get("tags"), "tags"),
        )


def _parse_instructions(raw: list[Any]) -> tuple[RecipeInstruction, ...]:
    """手順を正規化 (文字列のリストは 1 から採番)"""
    steps = []
    for index, entry in enumerate(raw, start=1):
        if isinstance(entry, str):
            steps.append(RecipeInstruction(step=index, instruction=entry))
        elif isinstance(entry, dict):
            steps.append(
                RecipeInstruction(
                    step=int(_to_number(entry.get("step", index)) or index),
                    instruction=_to_text(entry.get("instruction", "")),
                )
            )
        else:
            raise ValueError(f"Invalid instruction: {entry!r}")
    return tuple(steps)


def _to_list(value: Any, name: str) -> list[Any]:
    """単独の値を1要素のリストとして扱う"""
    if not value:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"{name} must be a list, got {value!r}")


def _to_texts(value: Any, name: str) -> tuple[str, ...]:
    return tuple(_to_text(v) for v in _to_list(value, name))


def _to_number(value: Any) -> float:
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip().split()[0])
    except (ValueError, IndexError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_duration(value: Any) -> str:
    # 手動保存レシピでは分数 (int) で届く
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{int(value)} minutes"
    return _to_text(value)
