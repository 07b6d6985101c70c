"""
Main orchestrator for the box office parser.

Sequences the pipeline for one request:
  listing page → ListingExtractor → for each stub, in rank order:
  release page → title page → detail-service page → TitleDetailExtractor

Every document is read through the PageCache.  Nothing is retried or skipped:
the first failing page aborts the run and its exception reaches the caller.
"""

from typing import Optional, Union
from urllib.parse import urlparse

from .config import LISTING_DOMAIN, PRO_DOMAIN, Settings
from .documents import decode_page
from .detail_extractor import TitleDetailExtractor
from .exceptions import RequiredElementMissing
from .fetcher import Fetcher
from .listing_extractor import ListingExtractor
from .page_cache import PageCache, PageVariant
from .schemas import (
    ParseRequest, RankedRelease, ReleaseBatch, SourceRequest, TitleDetail,
    WeekendRequest, YearRequest,
)
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")


class BoxOfficeParser:
    """
    Main orchestrator for box office extraction.

    Coordinates the pipeline:
    1. PageCache/Fetcher: raw bytes for each URL, fetched at most once
    2. ListingExtractor: ranked stubs from a weekend or yearly page
    3. TitleDetailExtractor: one TitleDetail per stub
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[Fetcher] = None,
        cache: Optional[PageCache] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.settings = settings or Settings.from_env()

        # The cache directory is created here, so an unusable cache root
        # fails before any request is made
        if cache is None:
            fetcher = fetcher or Fetcher(
                timeout=self.settings.request_timeout,
                headers=self.settings.headers
            )
            cache = PageCache(self.settings.cache_dir, fetcher=fetcher)
        self.cache = cache

        self.detail_extractor = TitleDetailExtractor(cast_limit=self.settings.cast_limit)

        logger.info("BoxOfficeParser initialized")

    def run(self, request: ParseRequest) -> Union[ReleaseBatch, TitleDetail]:
        """
        Run one request.

        Returns:
            ReleaseBatch for weekend/year requests, TitleDetail for source requests
        """
        if isinstance(request, WeekendRequest):
            return self._run_listing(request.url, ListingExtractor.weekend())
        if isinstance(request, YearRequest):
            return self._run_listing(request.url, ListingExtractor.yearly(request.year))
        if isinstance(request, SourceRequest):
            return self.parse_title(request.url)
        raise TypeError(f"Unsupported request: {request!r}")

    def parse_title(self, url: str) -> TitleDetail:
        """Parse a single detail-service title page on its own."""
        logger.info(f"Parsing title {url}")
        self.cache.ensure_directory()
        page = self.detail_extractor.parse_title(self._read(url, PageVariant.PRO))
        return self.detail_extractor.build_detail(page, pro_uri=url, listing_uri=url)

    def enrich(self, release: RankedRelease) -> TitleDetail:
        """Fetch and parse the three documents of one stub and attach the result."""
        if not release.cross_reference_uri:
            raise RequiredElementMissing(
                "release link", page=f"listing row {release.rank} ({release.title})")

        extractor = self.detail_extractor

        # (a) release page: financial summary and the title path
        summary = extractor.parse_release_summary(self._read(release.cross_reference_uri))
        if not summary.title_path:
            raise RequiredElementMissing("#title-summary-refiner a[href]",
                                         page=release.cross_reference_uri)

        # (b) listing-site title page: gross by market
        gross = extractor.parse_gross_breakdown(self._read(LISTING_DOMAIN + summary.title_path))

        # (c) detail-service title page, same path on the other host
        pro_uri = PRO_DOMAIN + summary.title_path
        page = extractor.parse_title(self._read(pro_uri, PageVariant.PRO))

        detail = extractor.build_detail(
            page,
            pro_uri=pro_uri,
            listing_uri=LISTING_DOMAIN + urlparse(release.cross_reference_uri).path,
            summary=summary,
            gross=gross,
        )
        release.attach_detail(detail)
        return detail

    def _run_listing(self, url: str, listing: ListingExtractor) -> ReleaseBatch:
        logger.info(f"Starting listing run: {url}")
        self.cache.ensure_directory()

        batch = listing.extract(self._read(url))
        for release in batch.releases:
            logger.info(f"#{release.rank} {release.title}")
            self.enrich(release)

        logger.info(f"Complete: {len(batch.releases)} releases")
        return batch

    def _read(self, url: str, variant: PageVariant = PageVariant.LISTING) -> str:
        return decode_page(self.cache.get(url, variant))


def parse_weekend(weekend_id: str, settings: Optional[Settings] = None) -> ReleaseBatch:
    """Convenience function to parse a weekend listing, e.g. "2024W29"."""
    return BoxOfficeParser(settings=settings).run(WeekendRequest(weekend_id=weekend_id))


def parse_year(year: int, settings: Optional[Settings] = None) -> ReleaseBatch:
    """Convenience function to parse a yearly listing."""
    return BoxOfficeParser(settings=settings).run(YearRequest(year=year))


def parse_source(url: str, settings: Optional[Settings] = None) -> TitleDetail:
    """Convenience function to parse one detail-service title page."""
    return BoxOfficeParser(settings=settings).run(SourceRequest(source_url=url))
