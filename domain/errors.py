class RecipeError(Exception):
    pass


class ValidationError(RecipeError):
    """Client supplied missing or malformed input."""


class GenerationError(RecipeError):
    """The generation service could not produce a recipe.

    `user_message` is safe to show to a client. `None` means the endpoint's
    generic message is used instead.
    """

    user_message: str | None = None

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CredentialError(GenerationError):
    user_message = "Invalid or missing Gemini API key. Please check your configuration."


class QuotaError(GenerationError):
    user_message = "API quota exceeded. Please try again later."


class GenerationTimeout(GenerationError):
    user_message = "Recipe generation timed out. Please try again."


class UpstreamError(GenerationError):
    pass


class RenderError(RecipeError):
    pass
