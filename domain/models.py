from datetime import datetime, timezone
from typing import Any, Sequence


def iso_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a trailing `Z`."""
    return (
        dt.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class GeneratedRecipe:
    def __init__(
        self,
        *,
        ingredients: Sequence[str],
        content: str,
        model: str,
        created_at: datetime | None = None,
    ) -> None:
        self.ingredients = list(ingredients)
        self.content = content
        self.model = model
        self.created_at = (
            datetime.now(timezone.utc) if created_at is None else created_at
        )

    def __repr__(self) -> str:
        return f"<GeneratedRecipe(model={self.model}, ingredients={self.ingredients})>"

    def __str__(self) -> str:
        return self.content

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "ingredients": self.ingredients,
            "recipe": self.content,
            "model": self.model,
            "timestamp": iso_timestamp(self.created_at),
        }
