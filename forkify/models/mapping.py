"""Map remote API payloads and submitted forms onto the internal recipe shapes.

The API speaks snake_case (`source_url`, `image_url`, `cooking_time`) inside a
`{"data": {...}}` envelope; state and bookmarks use the Recipe model instead.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from forkify.errors import IngredientFormatError, MalformedResponseError, UploadError
from forkify.models.recipe_schema import (
    ApiRecipe,
    ApiSearchHit,
    Ingredient,
    Recipe,
    SearchResultItem,
)

logger = logging.getLogger(__name__)

INGREDIENT_PREFIX = "ingredient"


def _envelope(data: Any, field: str) -> Any:
    try:
        return data["data"][field]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(f"Response has no data.{field}") from exc


def recipe_from_response(data: Any) -> Recipe:
    """Normalize a `{"data": {"recipe": {...}}}` response into a Recipe."""
    raw = _envelope(data, "recipe")
    try:
        api = ApiRecipe.model_validate(raw)
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid recipe payload ({exc.error_count()} errors)") from exc

    return Recipe(
        id=api.id,
        title=api.title,
        publisher=api.publisher,
        source_url=api.source_url,
        image=api.image_url,
        servings=api.servings,
        cooking_time=api.cooking_time,
        ingredients=[
            Ingredient(quantity=ing.quantity, unit=ing.unit or "", description=ing.description or "")
            for ing in api.ingredients
        ],
        # empty keys are treated as absent
        key=api.key or None,
    )


def search_results_from_response(data: Any) -> List[SearchResultItem]:
    raw = _envelope(data, "recipes")
    if not isinstance(raw, list):
        raise MalformedResponseError("data.recipes is not a list")
    try:
        hits = [ApiSearchHit.model_validate(rec) for rec in raw]
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid search result ({exc.error_count()} errors)") from exc

    return [
        SearchResultItem(
            id=hit.id,
            title=hit.title,
            publisher=hit.publisher,
            image=hit.image_url,
            key=hit.key or None,
        )
        for hit in hits
    ]


def _to_number(text: str) -> float | int:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text!r} is not a finite number")
    return int(value) if value.is_integer() else value


def parse_ingredients(form: Mapping[str, str]) -> List[Ingredient]:
    """Parse the non-empty `ingredientN` form fields, in form order.

    Each value must be 'quantity,unit,description'; quantity may be blank.
    """
    ingredients: List[Ingredient] = []
    for name, value in form.items():
        if not name.startswith(INGREDIENT_PREFIX) or value == "":
            continue
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 3:
            raise IngredientFormatError(
                f"Wrong ingredient format in {name}: {value!r}. "
                "Please use the format 'quantity,unit,description'."
            )
        quantity, unit, description = parts
        if quantity:
            try:
                amount = _to_number(quantity)
            except ValueError as exc:
                raise IngredientFormatError(f"Quantity in {name} is not a number: {quantity!r}") from exc
        else:
            amount = None
        ingredients.append(Ingredient(quantity=amount, unit=unit, description=description))
    logger.debug("Parsed %d ingredients from form", len(ingredients))
    return ingredients


def _form_number(form: Mapping[str, str], field: str) -> float | int:
    try:
        return _to_number(form.get(field, ""))
    except (TypeError, ValueError) as exc:
        raise UploadError(f"{field} must be a number, got {form.get(field)!r}") from exc


def upload_payload_from_form(form: Mapping[str, str]) -> Dict[str, Any]:
    """Build the server-facing upload body from a submitted recipe form."""
    ingredients = parse_ingredients(form)
    return {
        "title": form.get("title"),
        "source_url": form.get("sourceUrl"),
        "image_url": form.get("image"),
        "publisher": form.get("publisher"),
        "cooking_time": _form_number(form, "cookingTime"),
        "servings": _form_number(form, "servings"),
        "ingredients": [ing.model_dump() for ing in ingredients],
    }
