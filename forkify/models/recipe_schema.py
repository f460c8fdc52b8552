from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    # None means "no amount given"; such ingredients are never rescaled
    quantity: Optional[float] = None
    unit: str = ""
    description: str = ""


class Recipe(BaseModel):
    """A recipe as held in state and in the bookmark list.

    Bookmark entries can be partial, so only `id` is required.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    publisher: str = ""
    source_url: str = Field("", alias="sourceUrl")
    image: str = ""
    servings: float = 0
    cooking_time: float = Field(0, alias="cookingTime")
    ingredients: List[Ingredient] = Field(default_factory=list)
    key: Optional[str] = None
    bookmarked: bool = False

    def to_storage(self) -> Dict[str, Any]:
        """Camel-cased dict used for the persisted bookmark array."""
        data = self.model_dump(by_alias=True)
        if data["key"] is None:
            data.pop("key")
        return data


class SearchResultItem(BaseModel):
    id: str
    title: str = ""
    publisher: str = ""
    image: str = ""
    key: Optional[str] = None


class SearchState(BaseModel):
    query: str = ""
    results: List[SearchResultItem] = Field(default_factory=list)
    page: int = 1
    results_per_page: int = Field(10, gt=0)


class ApplicationState(BaseModel):
    recipe: Optional[Recipe] = None
    search: SearchState = Field(default_factory=SearchState)
    bookmarks: List[Recipe] = Field(default_factory=list)


# Shapes returned by the remote API (snake_case, image_url)


class ApiIngredient(BaseModel):
    quantity: Optional[float] = None
    unit: Optional[str] = ""
    description: Optional[str] = ""


class ApiRecipe(BaseModel):
    id: str
    title: str
    publisher: str = ""
    source_url: str = ""
    image_url: str = ""
    servings: float = 0
    cooking_time: float = 0
    ingredients: List[ApiIngredient] = Field(default_factory=list)
    key: Optional[str] = None


class ApiSearchHit(BaseModel):
    id: str
    title: str
    publisher: str = ""
    image_url: str = ""
    key: Optional[str] = None
