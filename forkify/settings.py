"""Runtime configuration for the forkify client, read from the environment.

`cli` calls `load_dotenv()` before importing this module, so values from a
local .env file are visible here. Only FORKIFY_API_KEY is required, and only
by commands that reach the remote API; see `validate_required`.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


@dataclass
class Settings:
    # Remote recipe API
    API_URL: str = _get("FORKIFY_API_URL", "https://forkify-api.herokuapp.com/api/v2/recipes/")
    API_KEY: str | None = _get("FORKIFY_API_KEY")
    # Seconds before the fetcher gives up on a request
    TIMEOUT_SEC: float = float(_get("TIMEOUT_SEC", "10"))

    # Pagination page size for search results
    RES_PER_PAGE: int = int(_get("RES_PER_PAGE", "10"))
    # Upload-modal auto-close delay for a UI front end. Nothing in this package
    # reads it; it is kept so a UI can share this configuration.
    MODAL_CLOSE_SEC: float = float(_get("MODAL_CLOSE_SEC", "2.5"))

    # sqlite file holding the persisted bookmarks
    BOOKMARKS_DB: str = _get("BOOKMARKS_DB", os.path.join("data", "forkify.db"))

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()


def validate_required() -> None:
    """Raise RuntimeError naming each required variable that is unset.

    Reads os.environ at call time, so a .env loaded after import still counts.
    """
    missing = []
    if not os.getenv("FORKIFY_API_KEY"):
        missing.append("FORKIFY_API_KEY (recipe API access key)")
    if missing:
        msg = (
            "Missing required environment variables: "
            + ", ".join(missing)
            + "\nPlease set them in your .env or environment and try again."
        )
        raise RuntimeError(msg)
