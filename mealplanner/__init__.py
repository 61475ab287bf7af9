"""Meal Planner - Bedrock を使用した献立・レシピ生成バックエンド"""

__version__ = "0.1.0"
