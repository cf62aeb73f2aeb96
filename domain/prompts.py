from typing import Sequence


SYSTEM_PROMPT = """
You are a helpful cooking assistant that creates recipes based on ingredients provided by users.

Guidelines:
- Create practical, delicious recipes using some or all of the provided ingredients
- You can suggest additional common ingredients if needed, but try to keep it simple
- Include clear instructions and estimated cooking time
- Format your response in markdown for easy reading
- Make the recipe suitable for home cooking
- If the ingredients seem unusual together, suggest the best way to use them or recommend a fusion approach
""".strip()


CREATE_RECIPE_PROMPT = """{system}

I have these ingredients: {ingredients}

Please suggest a recipe I can make with some or all of these ingredients. Include ingredients list, instructions, and estimated cooking time."""


def join_ingredients(ingredients: Sequence[str]) -> str:
    return ", ".join(ingredients)


class CreateRecipePrompt:
    def __init__(
        self,
        ingredients: Sequence[str],
        system: str | None = None,
    ) -> None:
        self.ingredients = tuple(ingredients)
        self.system = SYSTEM_PROMPT if system is None else system

    def __str__(self) -> str:
        return CREATE_RECIPE_PROMPT.format(
            system=self.system,
            ingredients=join_ingredients(self.ingredients),
        )


def build_prompt(ingredients: Sequence[str]) -> str:
    """Instruction string for the model. Does not validate `ingredients`."""
    return str(CreateRecipePrompt(ingredients))
