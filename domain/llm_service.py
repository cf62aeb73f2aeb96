import logging
from typing import Protocol, Sequence

from domain.gemini import DEFAULT_MODEL, GeminiClient
from domain.prompts import build_prompt


logger = logging.getLogger(__name__)


class RecipeGenerator(Protocol):
    model: str

    async def create_recipe(self, ingredients: Sequence[str]) -> str:
        ...

    async def aclose(self) -> None:
        ...


class LLMService:
    """Asks the generation service for a markdown recipe.

    Holds only the client, which in turn holds only the credential and model.
    Errors from the client are already classified and are not caught here.
    """

    def __init__(
        self,
        client: GeminiClient | None = None,
        *,
        model: str | None = None,
    ) -> None:
        model = DEFAULT_MODEL if model is None else model
        self.client = GeminiClient(model=model) if client is None else client

    @property
    def model(self) -> str:
        return self.client.model

    async def create_recipe(self, ingredients: Sequence[str]) -> str:
        prompt = build_prompt(ingredients)
        logger.info(
            "Requesting recipe from %s for %d ingredients", self.model, len(ingredients)
        )
        return await self.client.generate(prompt)

    async def aclose(self) -> None:
        await self.client.aclose()
