"""Error taxonomy shared by the reconciliation engine."""

from __future__ import annotations

from typing import Optional


class DataIntegrityError(ValueError):
    """Input references data the engine cannot resolve.

    Raised for unknown ingredient or recipe identities, non-positive base
    servings and duplicate rows that callers were expected to merge. The
    computation that raised it returns nothing.
    """

    def __init__(
        self,
        message: str,
        *,
        recipe_id: Optional[str] = None,
        ingredient_id: Optional[str] = None,
    ) -> None:
        self.recipe_id = recipe_id
        self.ingredient_id = ingredient_id
        context = []
        if recipe_id is not None:
            context.append(f"recipe_id={recipe_id}")
        if ingredient_id is not None:
            context.append(f"ingredient_id={ingredient_id}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class EmptyInputWarning(UserWarning):
    """A recipe without requirements or a meal plan without assignments."""


__all__ = ["DataIntegrityError", "EmptyInputWarning"]
