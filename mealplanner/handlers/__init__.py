"""
Lambda Handlers for Meal Planner

サーバレス構成のエントリポイント:
- Business API (献立リクエスト・取得)
- Plan Worker (EventBridge → Bedrock 献立生成)
- Recipe Generator (同期レシピ生成)
- Users (登録・プロフィール)
- Recipes (保存・一覧・削除)
"""
