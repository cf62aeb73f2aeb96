"""The three request behaviours behind the routes.

Each validates first and calls nothing downstream when validation fails.
Documents come back unrendered; layout is left to the caller.
Errors are not caught here; the HTTP layer maps them to responses.
"""

from datetime import datetime
from typing import Any

from domain.errors import ValidationError
from domain.llm_service import RecipeGenerator
from domain.markdown import to_plain_text
from domain.models import GeneratedRecipe
from domain.pdf import RecipeDocument, render_recipe


INGREDIENTS_REQUIRED = "Please provide an array of ingredients"
BOTH_REQUIRED = "Please provide both ingredients and recipe"


def validate_ingredients(value: Any, *, message: str = INGREDIENTS_REQUIRED) -> list[str]:
    if not isinstance(value, list) or not value:
        raise ValidationError(message)
    if not all(isinstance(i, str) and i.strip() for i in value):
        raise ValidationError(message)
    return value


def validate_recipe(value: Any, *, message: str = BOTH_REQUIRED) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


async def generate_recipe(ingredients: Any, *, llm: RecipeGenerator) -> GeneratedRecipe:
    ingredients = validate_ingredients(ingredients)
    content = await llm.create_recipe(ingredients)
    return GeneratedRecipe(ingredients=ingredients, content=content, model=llm.model)


def render_existing_recipe(
    ingredients: Any,
    recipe: Any,
    *,
    now: datetime | None = None,
) -> RecipeDocument:
    ingredients = validate_ingredients(ingredients, message=BOTH_REQUIRED)
    recipe = validate_recipe(recipe)
    now = datetime.now() if now is None else now
    return render_recipe(ingredients, to_plain_text(recipe), now)


async def generate_and_render(
    ingredients: Any,
    *,
    llm: RecipeGenerator,
    now: datetime | None = None,
) -> RecipeDocument:
    ingredients = validate_ingredients(ingredients)
    content = await llm.create_recipe(ingredients)
    now = datetime.now() if now is None else now
    return render_recipe(ingredients, to_plain_text(content), now)
