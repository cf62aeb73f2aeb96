from typing import Iterator, Sequence

import pytest
from starlette.testclient import TestClient

from app.app import create_app


RECIPE = """# Egg Fried Rice

**Cooking time:** 15 mins

## Ingredients

- 2 eggs
- 1 cup cooked *day-old* rice

## Instructions

1. Scramble the eggs in a hot wok.
2. Add the rice and a splash of `soy sauce`.
"""


class FakeLLM:
    model = "fake-gemini"

    def __init__(self, recipe: str = RECIPE, error: Exception | None = None) -> None:
        self.recipe = recipe
        self.error = error
        self.calls: list[list[str]] = []
        self.closed = False

    async def create_recipe(self, ingredients: Sequence[str]) -> str:
        self.calls.append(list(ingredients))
        if self.error is not None:
            raise self.error
        return self.recipe

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(fake_llm: FakeLLM) -> Iterator[TestClient]:
    with TestClient(create_app(llm=fake_llm)) as c:
        yield c
