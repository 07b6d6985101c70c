"""
File-based page cache for raw HTML.

Every document the pipeline reads goes through here.  A page is fetched at
most once per cache directory: after the first successful fetch the file on
disk is authoritative forever.  There is no expiry, no checksum and no
refresh; delete the file (or the directory) to force a new fetch.

Layout:
    {cache_dir}/{key}.html       listing-site pages
    {cache_dir}/pro.{key}.html   detail-service pages
"""

import os
import re
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

from .fetcher import Fetcher
from .exceptions import CacheDirectoryUnavailable
from .logger import get_module_logger

logger = get_module_logger("page_cache")

# Path fragments that carry no identity ("/release/rl123/" and
# "/title/tt123/" only differ by the id)
BOILERPLATE_SEGMENTS = ('/', 'weekend', 'release', 'title')

UNSAFE_KEY_CHARS = re.compile(r'[^A-Za-z0-9._-]')


class PageVariant(Enum):
    """Which site a URL belongs to.  Both sites share the /title/tt.../ shape."""
    LISTING = "listing"
    PRO = "pro"


class PageCache:
    """
    Fetch-or-populate cache keyed by URL path.

    Two processes sharing a directory may both miss and both fetch; writes go
    through a temporary file and an atomic rename, so the loser only wastes
    a request and never leaves a torn file behind.
    """

    def __init__(self, cache_dir: Union[str, Path], fetcher: Optional[Fetcher] = None):
        """
        Initialize the cache, creating the directory if needed.

        Raises:
            CacheDirectoryUnavailable: if the directory cannot be created
        """
        self.cache_dir = Path(cache_dir)
        self.fetcher = fetcher or Fetcher()

        self.ensure_directory()
        logger.info(f"Page cache initialized at: {self.cache_dir}")

    def ensure_directory(self) -> None:
        """
        Create the cache directory if it is missing.

        Raises:
            CacheDirectoryUnavailable: if the directory cannot be created
        """
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheDirectoryUnavailable(str(self.cache_dir), details={"error": str(e)})

    @staticmethod
    def key_for(url: str, variant: PageVariant = PageVariant.LISTING) -> str:
        """
        Derive the cache key for a URL.

        Scheme, host and query are ignored; '/' and the boilerplate words are
        removed from the path; whatever is left that is not filesystem-safe
        becomes '_'.
        """
        key = urlparse(url).path
        for fragment in BOILERPLATE_SEGMENTS:
            key = key.replace(fragment, '')
        key = UNSAFE_KEY_CHARS.sub('_', key) or 'index'

        if variant is PageVariant.PRO:
            key = f"pro.{key}"
        return key

    def path_for(self, url: str, variant: PageVariant = PageVariant.LISTING) -> Path:
        return self.cache_dir / f"{self.key_for(url, variant)}.html"

    def exists(self, url: str, variant: PageVariant = PageVariant.LISTING) -> bool:
        """Check if a page is cached."""
        return self.path_for(url, variant).exists()

    def get(self, url: str, variant: PageVariant = PageVariant.LISTING) -> bytes:
        """
        Return the cached bytes for a URL, fetching and storing them on a miss.

        The value returned is always what was read back from disk.

        Raises:
            FetchFailed: on a miss whose fetch fails (nothing is written)
        """
        cache_file = self.path_for(url, variant)

        if cache_file.exists():
            logger.debug(f"Cache hit: {cache_file.name}")
            return cache_file.read_bytes()

        logger.info(f">> {cache_file.stem} ({url})")
        content = self.fetcher.fetch(url)
        self._write(cache_file, content)

        return cache_file.read_bytes()

    def _write(self, cache_file: Path, content: bytes) -> None:
        """Write bytes verbatim via a temporary file and an atomic rename."""
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp-", suffix=".html")
        try:
            with os.fdopen(fd, 'wb') as tmp:
                tmp.write(content)
            os.replace(tmp_name, cache_file)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached {len(content)} bytes -> {cache_file}")
