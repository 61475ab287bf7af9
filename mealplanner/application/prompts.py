"""
Prompt Builders

ユーザーの食事プロフィールから Bedrock 用のシステムプロンプトを組み立てる。
出力形式 (JSON) の契約は response_parser と対応している。
"""
from __future__ import annotations

from mealplanner.domain.meal_plan import PlanRequest
from mealplanner.domain.user import UserProfile

MEAL_PLAN_OUTPUT_FORMAT = """{
  "days": [
    {
      "day": 1,
      "date": "YYYY-MM-DD",
      "meals": [
        {
          "mealType": "breakfast",
          "recipe": {
            "recipeName": "Name",
            "description": "Description",
            "prepTime": "X minutes",
            "cookTime": "X minutes",
            "totalTime": "X minutes",
            "servings": 1,
            "difficulty": "Easy/Medium/Hard",
            "ingredients": [
              {"item": "ingredient", "quantity": "amount", "notes": "optional"}
            ],
            "instructions": [
              {"step": 1, "instruction": "detailed instruction"}
            ],
            "nutritionalInfo": {
              "perServing": {
                "calories": 0,
                "protein": "0g",
                "carbohydrates": "0g",
                "fat": "0g",
                "fiber": "0g",
                "sodium": "0mg"
              }
            },
            "tags": ["tag1", "tag2"]
          }
        }
      ],
      "dailyTotals": {
        "calories": 0,
        "protein": "0g",
        "carbohydrates": "0g",
        "fat": "0g"
      }
    }
  ],
  "shoppingList": {
    "produce": [],
    "proteins": [],
    "dairy": [],
    "grains": [],
    "pantry": [],
    "other": []
  },
  "weeklyNutritionSummary": {
    "averageDailyCalories": 0,
    "proteinRange": "X-Y g",
    "carbRange": "X-Y g",
    "fatRange": "X-Y g"
  }
}"""

RECIPE_OUTPUT_FORMAT = """{
  "recipeName": "Name of the dish",
  "description": "Brief description of the dish",
  "prepTime": "X minutes",
  "cookTime": "X minutes",
  "totalTime": "X minutes",
  "servings": 1,
  "difficulty": "Easy/Medium/Hard",
  "ingredients": [
    {"item": "ingredient name", "quantity": "amount", "notes": "optional preparation notes"}
  ],
  "instructions": [
    {"step": 1, "instruction": "detailed instruction"}
  ],
  "nutritionalInfo": {
    "perServing": {
      "calories": 0,
      "protein": "Xg",
      "carbohydrates": "Xg",
      "fat": "Xg",
      "fiber": "Xg",
      "sodium": "Xmg"
    }
  },
  "dietaryCompliance": {
    "suitable": ["list of diets this recipe fits"],
    "warnings": ["any relevant warnings"]
  },
  "tips": ["helpful cooking or storage tips"]
}"""


def _profile_lines(profile: UserProfile, dietary_goal: str | None = None) -> list[str]:
    """プロフィール部分の行を生成"""
    lines = []
    if profile.allergies:
        lines.append(
            f"- CRITICAL ALLERGIES: {', '.join(profile.allergies)} "
            "- NEVER include these ingredients or their derivatives"
        )
    if profile.dietary_restrictions:
        lines.append(f"- Dietary Restrictions: {', '.join(profile.dietary_restrictions)}")
    if dietary_goal:
        lines.append(f"- Dietary Goal: {dietary_goal}")
    if profile.preferences.cuisine_types:
        lines.append(f"- Preferred Cuisines: {', '.join(profile.preferences.cuisine_types)}")
    if profile.target_calories:
        lines.append(f"- Daily Calorie Target: {profile.target_calories} kcal")
    return lines


def build_meal_plan_system_prompt(
    profile: UserProfile,
    dietary_goal: str | None = None,
) -> str:
    """献立生成用のシステムプロンプト"""
    sections = [
        "You are a Professional Chef and Registered Dietitian AI assistant "
        "specializing in multi-day meal planning.",
        "",
        "USER'S DIETARY PROFILE:",
        *(_profile_lines(profile, dietary_goal) or ["- No specific restrictions"]),
        "",
        "MEAL PLAN REQUIREMENTS:",
        "1. Create diverse meals across all days to prevent monotony",
        "2. Balance macronutrients throughout the week",
        "3. Consider ingredient overlap to minimize shopping complexity",
        "4. Scale difficulty appropriately across the week",
        "5. Provide complete nutritional information for each meal",
        "",
        "OUTPUT FORMAT:",
        "Return a JSON object of daily meal plans with this structure:",
        "",
        MEAL_PLAN_OUTPUT_FORMAT,
        "",
        "IMPORTANT: Return ONLY the JSON object, no additional text.",
    ]
    return "\n".join(sections)


def build_meal_plan_user_message(request: PlanRequest) -> str:
    """献立生成用のユーザーメッセージ"""
    lines = [
        f"Generate a {request.duration}-day meal plan with "
        f"{request.meals_per_day} meals per day.",
        f"Start Date: {request.start_date}",
    ]
    if request.additional_requirements:
        lines.append(f"Additional Requirements: {request.additional_requirements}")
    lines.append("")
    lines.append(
        "Please ensure variety across days and balance of nutrients throughout the week."
    )
    return "\n".join(lines)


def build_recipe_system_prompt(profile: UserProfile) -> str:
    """レシピ生成用のシステムプロンプト"""
    profile_lines = _profile_lines(profile)
    if profile.preferences.skill_level:
        profile_lines.append(f"- Cooking Skill Level: {profile.preferences.skill_level}")
    if profile.preferences.cooking_time:
        profile_lines.append(f"- Preferred Cooking Time: {profile.preferences.cooking_time}")

    sections = [
        "You are a Professional Chef and Registered Dietitian AI assistant, "
        "specializing in personalized recipe creation and nutritional planning.",
        "",
        "Your core responsibilities:",
        "1. Create delicious, creative recipes based on available ingredients",
        "2. Ensure all recipes comply with the user's dietary restrictions and allergies",
        "3. Provide accurate nutritional information",
        "4. Offer professional cooking guidance and techniques",
        "",
        "USER'S DIETARY PROFILE:",
        *profile_lines,
        "",
        "OUTPUT FORMAT REQUIREMENTS:",
        "You must respond with a recipe in the following structured JSON format:",
        "",
        RECIPE_OUTPUT_FORMAT,
        "",
        "IMPORTANT: Return ONLY the JSON object, no additional text before or after.",
    ]
    return "\n".join(sections)


def build_recipe_user_message(
    ingredients: str,
    meal_type: str | None = None,
    servings: int | None = None,
    additional_notes: str | None = None,
) -> str:
    """レシピ生成用のユーザーメッセージ"""
    lines = [f"Please create a recipe using these ingredients: {ingredients}"]
    if meal_type:
        lines.append(f"Meal Type: {meal_type}")
    if servings:
        lines.append(f"Servings: {servings}")
    if additional_notes:
        lines.append(f"Additional Notes: {additional_notes}")
    return "\n".join(lines)
