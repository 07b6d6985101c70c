"""
Box Office Parser

Extracts ranked box office records from Box Office Mojo listing pages and
enriches each title with financial and cast/crew details.
- ListingExtractor: weekend/yearly ranking tables → RankedRelease stubs
- TitleDetailExtractor: release, title and detail-service pages → TitleDetail
- BoxOfficeParser: orchestrates both over a disk-backed page cache

Public API surface:
  Orchestration   — BoxOfficeParser, parse_weekend, parse_year, parse_source
  Requests        — WeekendRequest, YearRequest, SourceRequest
  Data models     — ReleaseBatch, RankedRelease, TitleDetail, GrossBreakdown, Credit
  Enumerations    — Genre, Distributor, RoleKind, ContentType
  Error types     — CacheDirectoryUnavailable, FetchFailed, RequiredElementMissing
  I/O             — PageCache, PageVariant, Fetcher
  Configuration   — Settings
"""

# --- Orchestration ---
from .main import BoxOfficeParser, parse_weekend, parse_year, parse_source

# --- Pipeline stages ---
from .listing_extractor import ListingExtractor
from .detail_extractor import TitleDetailExtractor

# --- Data models ---
from .schemas import (
    WeekendRequest, YearRequest, SourceRequest,
    ReleaseBatch, RankedRelease, TitleDetail, GrossBreakdown, Credit,
    Genre, Distributor, RoleKind, ContentType,
)

# --- Exceptions ---
from .exceptions import (
    BoxOfficeError, CacheDirectoryUnavailable, FetchFailed, RequiredElementMissing,
)

# --- I/O and configuration ---
from .page_cache import PageCache, PageVariant
from .fetcher import Fetcher
from .config import Settings

__version__ = "0.1.0"
__all__ = [
    "BoxOfficeParser",
    "parse_weekend",
    "parse_year",
    "parse_source",
    "ListingExtractor",
    "TitleDetailExtractor",
    "WeekendRequest",
    "YearRequest",
    "SourceRequest",
    "ReleaseBatch",
    "RankedRelease",
    "TitleDetail",
    "GrossBreakdown",
    "Credit",
    "Genre",
    "Distributor",
    "RoleKind",
    "ContentType",
    "BoxOfficeError",
    "CacheDirectoryUnavailable",
    "FetchFailed",
    "RequiredElementMissing",
    "PageCache",
    "PageVariant",
    "Fetcher",
    "Settings",
]
