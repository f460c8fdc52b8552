"""Exception types raised by the fetcher, the store and the recipe state."""

from __future__ import annotations


class ForkifyError(Exception):
    """Base class for every error raised by this package."""


class NetworkError(ForkifyError):
    """The request could not be completed (connection, timeout, non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ForkifyError):
    """The response body is not JSON or lacks the expected envelope."""


class RecipeLoadError(ForkifyError):
    pass


class SearchError(ForkifyError):
    pass


class UploadError(ForkifyError):
    pass


class IngredientFormatError(ForkifyError):
    """A submitted ingredient is not of the form 'quantity,unit,description'."""


class InvalidServingsError(ForkifyError):
    """Serving sizes cannot be rescaled (no recipe loaded or zero servings)."""
