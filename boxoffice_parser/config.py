"""
Runtime settings for the box office parser.

Everything a run needs that is not part of a request lives here: where the
page cache goes, how many cast rows to read per title, and how the HTTP
client identifies itself.  Values come from constructor arguments or from
BOXOFFICE_* environment variables (a .env file is loaded by run_parser.py).
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .logger import get_module_logger

logger = get_module_logger("config")

# --- Source sites ---
LISTING_DOMAIN = "https://www.boxofficemojo.com"
PRO_DOMAIN = "https://pro.imdb.com"

WEEKEND_URL = LISTING_DOMAIN + "/weekend/{weekend_id}/"
YEAR_URL = LISTING_DOMAIN + "/year/{year}/?grossesOption=totalGrosses"

# --- Batch caps ---
WEEKEND_LIMIT = 10
YEAR_LIMIT = 30

# One cap for both the release-linked and the direct-title path.  Pages
# reached through a release were historically read with 8 rows; pass
# cast_limit=8 to reproduce that.
DEFAULT_CAST_LIMIT = 10

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class Settings(BaseModel):
    """Settings shared by the fetcher, the cache and the extractors."""
    cache_dir: Path = Field(default_factory=lambda: Path.cwd() / "cache")
    cast_limit: int = Field(default=DEFAULT_CAST_LIMIT, ge=0)
    # None keeps the transport default (no timeout)
    request_timeout: Optional[float] = Field(default=None, gt=0)
    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from BOXOFFICE_* environment variables.

        Explicit keyword arguments win over the environment; anything left
        unset falls back to the model defaults.
        """
        values = {}

        cache_dir = os.getenv("BOXOFFICE_CACHE_DIR")
        if cache_dir:
            values["cache_dir"] = Path(cache_dir)

        cast_limit = os.getenv("BOXOFFICE_CAST_LIMIT")
        if cast_limit:
            values["cast_limit"] = int(cast_limit)

        timeout = os.getenv("BOXOFFICE_TIMEOUT")
        if timeout:
            values["request_timeout"] = float(timeout)

        values.update({k: v for k, v in overrides.items() if v is not None})
        settings = cls(**values)
        logger.debug(f"Settings resolved: cache_dir={settings.cache_dir}, "
                     f"cast_limit={settings.cast_limit}")
        return settings
