"""Recipe application state: current recipe, search results and bookmarks.

RecipeState owns one ApplicationState and is the only thing that mutates it.
Recipes and search results come from the remote API through a Fetcher;
bookmarks are written through to a persistent key/value store on every change.

Overlapping async loads are not guarded: if two `load_recipe` calls are in
flight, whichever resolves last becomes the current recipe.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, List, Mapping, Optional, Protocol
from urllib.parse import urlencode

from pydantic import TypeAdapter, ValidationError

from forkify.errors import (
    ForkifyError,
    InvalidServingsError,
    RecipeLoadError,
    SearchError,
    UploadError,
)
from forkify.models.mapping import (
    recipe_from_response,
    search_results_from_response,
    upload_payload_from_form,
)
from forkify.models.recipe_schema import (
    ApplicationState,
    Recipe,
    SearchResultItem,
    SearchState,
)
from forkify.settings import Settings

logger = logging.getLogger(__name__)

BOOKMARKS_KEY = "bookmarks"

_BOOKMARK_LIST = TypeAdapter(List[Recipe])


class RecipeFetcher(Protocol):
    async def request(self, url: str, body: Any = None) -> Any:
        """Return the decoded JSON body or raise NetworkError / MalformedResponseError."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class RecipeState:
    def __init__(
        self,
        fetcher: RecipeFetcher,
        store: KeyValueStore,
        *,
        api_url: str,
        api_key: str,
        results_per_page: int = 10,
    ):
        self.fetcher = fetcher
        self.store = store
        self.api_url = api_url
        self.api_key = api_key
        self.state = ApplicationState(search=SearchState(results_per_page=results_per_page))
        self._load_bookmarks()

    @classmethod
    def from_settings(cls, fetcher: RecipeFetcher, store: KeyValueStore, settings: Settings) -> "RecipeState":
        return cls(
            fetcher,
            store,
            api_url=settings.API_URL,
            api_key=settings.API_KEY or "",
            results_per_page=settings.RES_PER_PAGE,
        )

    @property
    def bookmarks(self) -> List[Recipe]:
        return self.state.bookmarks

    def _url(self, path: str = "", **params: str) -> str:
        params["key"] = self.api_key
        return f"{self.api_url}{path}?{urlencode(params)}"

    async def load_recipe(self, id: str) -> None:
        """Fetch recipe `id` and make it the current recipe.

        Raises RecipeLoadError; the current recipe is left as it was.
        """
        try:
            data = await self.fetcher.request(self._url(id))
            recipe = recipe_from_response(data)
        except ForkifyError as exc:
            logger.error("Loading recipe %s failed: %s", id, exc)
            raise RecipeLoadError(f"Could not load recipe {id}: {exc}") from exc

        recipe.bookmarked = any(bookmark.id == id for bookmark in self.state.bookmarks)
        self.state.recipe = recipe
        logger.info("Loaded recipe %s (%s)", id, recipe.title)

    async def load_search_results(self, query: str) -> None:
        """Search recipes for `query` and reset pagination to the first page.

        The query is recorded before the request, so it survives a failed
        search. On failure (SearchError) the previous results stay in place.
        """
        self.state.search.query = query
        try:
            data = await self.fetcher.request(self._url(search=query))
            results = search_results_from_response(data)
        except ForkifyError as exc:
            logger.error("Search for %r failed: %s", query, exc)
            raise SearchError(f"Search for {query!r} failed: {exc}") from exc

        self.state.search.results = results
        self.state.search.page = 1
        logger.info("Search %r returned %d results", query, len(results))

    def get_search_results_page(self, page: Optional[int] = None) -> List[SearchResultItem]:
        """Return one page of search results and remember it as the current page."""
        search = self.state.search
        if page is None:
            page = search.page
        search.page = page

        start = (page - 1) * search.results_per_page
        end = page * search.results_per_page
        if end <= 0:
            # negative slice bounds would index from the tail
            return []
        return search.results[max(start, 0):end]

    def search_page_count(self) -> int:
        search = self.state.search
        return math.ceil(len(search.results) / search.results_per_page)

    def update_servings(self, new_servings: float) -> None:
        """Rescale every ingredient quantity of the current recipe to `new_servings`."""
        recipe = self.state.recipe
        if recipe is None:
            raise InvalidServingsError("No recipe loaded")
        previous = recipe.servings
        if not previous:
            raise InvalidServingsError(f"Cannot rescale recipe {recipe.id}: it has {previous} servings")

        for ing in recipe.ingredients:
            if ing.quantity is None:
                continue
            ing.quantity = ing.quantity * new_servings / previous
        recipe.servings = new_servings
        logger.debug("Recipe %s servings %s -> %s", recipe.id, previous, new_servings)

    def _persist_bookmarks(self) -> None:
        payload = json.dumps([bookmark.to_storage() for bookmark in self.state.bookmarks])
        self.store.set(BOOKMARKS_KEY, payload)

    def _load_bookmarks(self) -> None:
        stored = self.store.get(BOOKMARKS_KEY)
        if not stored:
            return
        try:
            self.state.bookmarks = _BOOKMARK_LIST.validate_json(stored)
        except ValidationError:
            logger.warning("Ignoring unreadable persisted bookmarks")
            return
        logger.debug("Hydrated %d bookmarks", len(self.state.bookmarks))

    def add_bookmark(self, recipe: Recipe) -> None:
        """Append `recipe` to the bookmarks and persist them.

        No duplicate check is made; bookmarking the same recipe twice stores it twice.
        """
        self.state.bookmarks.append(recipe)

        if self.state.recipe is not None and recipe.id == self.state.recipe.id:
            self.state.recipe.bookmarked = True

        self._persist_bookmarks()

    def delete_bookmark(self, id: str) -> None:
        """Remove the first bookmark with `id` (no-op when absent) and persist."""
        for index, bookmark in enumerate(self.state.bookmarks):
            if bookmark.id == id:
                del self.state.bookmarks[index]
                break

        if self.state.recipe is not None and id == self.state.recipe.id:
            self.state.recipe.bookmarked = False

        self._persist_bookmarks()

    def clear_bookmarks(self) -> None:
        """Remove the persisted bookmarks. The in-memory list is kept."""
        self.store.remove(BOOKMARKS_KEY)

    async def upload_recipe(self, form: Mapping[str, str]) -> None:
        """Upload a recipe from a submitted form, then make it current and bookmark it.

        Malformed ingredients raise IngredientFormatError before any request.
        """
        payload = upload_payload_from_form(form)

        try:
            data = await self.fetcher.request(self._url(), payload)
            recipe = recipe_from_response(data)
        except ForkifyError as exc:
            logger.error("Uploading recipe %r failed: %s", payload["title"], exc)
            raise UploadError(f"Could not upload recipe: {exc}") from exc

        self.state.recipe = recipe
        self.add_bookmark(recipe)
        logger.info("Uploaded recipe %s (%s)", recipe.id, recipe.title)
