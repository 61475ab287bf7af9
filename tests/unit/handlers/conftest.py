"""Lambda Handler Test Fixtures"""
from types import SimpleNamespace

import pytest

HANDLER_MODULES = [
    "mealplanner.handlers.business_api.handler",
    "mealplanner.handlers.plan_worker.handler",
    "mealplanner.handlers.recipe_generator.handler",
    "mealplanner.handlers.users.handler",
    "mealplanner.handlers.recipes.handler",
]


@pytest.fixture
def lambda_context():
    return SimpleNamespace(aws_request_id="aws-req-1")


@pytest.fixture(autouse=True)
def fake_container(monkeypatch, container):
    """各ハンドラーの get_container をインメモリ実装に差し替える"""
    for module in HANDLER_MODULES:
        monkeypatch.setattr(f"{module}.get_container", lambda: container)
    return container
