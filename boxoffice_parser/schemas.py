"""
Pydantic schemas defining the contracts between pipeline stages.

Data flow through the pipeline:
  ParseRequest → Orchestrator → PageCache bytes
  listing HTML → ListingExtractor → ReleaseBatch of RankedRelease stubs
  release HTML → ReleaseSummary, title HTML → GrossBreakdown,
  pro HTML → TitlePage; the three merge into one frozen TitleDetail
  which is attached to its stub exactly once.
"""

from datetime import date
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .config import WEEKEND_URL, YEAR_URL


# --- Labelled enumerations ---
# Each enumeration is closed and maps its values to the display labels the
# source pages use.  Reverse lookups of unknown labels return None so the
# extractors can drop them without raising.

class LabeledEnum(Enum):
    """Enum with a bidirectional value ↔ display-label table."""

    @classmethod
    def labels(cls) -> dict:
        raise NotImplementedError

    @property
    def label(self) -> str:
        return self.labels()[self]

    @classmethod
    def from_label(cls, label: str):
        """Reverse-map a display label; None when the label is unknown."""
        reverse = {text: member for member, text in cls.labels().items()}
        return reverse.get(label.strip())


class Genre(LabeledEnum):
    ACTION = 1
    DRAMA = 2
    FAMILY = 3
    ADVENTURE = 4
    SCI_FI = 5
    COMEDY = 6
    BIOGRAPHY = 7
    WESTERN = 8
    CRIME = 9
    THRILLER = 10
    ROMANCE = 11
    MYSTERY = 12
    FANTASY = 13
    ANIMATION = 14
    SPORT = 15
    HORROR = 16
    HISTORY = 17
    MUSIC = 18
    MUSICAL = 19
    WAR = 20
    DOCUMENTARY = 21

    @classmethod
    def labels(cls) -> dict:
        return {
            cls.ACTION: "Action",
            cls.DRAMA: "Drama",
            cls.FAMILY: "Family",
            cls.ADVENTURE: "Adventure",
            cls.SCI_FI: "Sci-Fi",
            cls.COMEDY: "Comedy",
            cls.BIOGRAPHY: "Biography",
            cls.WESTERN: "Western",
            cls.CRIME: "Crime",
            cls.THRILLER: "Thriller",
            cls.ROMANCE: "Romance",
            cls.MYSTERY: "Mystery",
            cls.FANTASY: "Fantasy",
            cls.ANIMATION: "Animation",
            cls.SPORT: "Sport",
            cls.HORROR: "Horror",
            cls.HISTORY: "History",
            cls.MUSIC: "Music",
            cls.MUSICAL: "Musical",
            cls.WAR: "War",
            cls.DOCUMENTARY: "Documentary",
        }


class Distributor(LabeledEnum):
    """Distributors as Box Office Mojo names them on release pages."""
    DISNEY = 1
    WARNER_BROS = 2
    UNIVERSAL = 3
    SONY = 4
    PARAMOUNT = 5
    TWENTIETH_CENTURY = 6
    LIONSGATE = 7
    AMAZON_MGM = 8
    MGM = 9
    A24 = 10
    NEON = 11
    FOCUS_FEATURES = 12
    SEARCHLIGHT = 13
    ANGEL_STUDIOS = 14
    ROADSIDE_ATTRACTIONS = 15
    BLEECKER_STREET = 16
    IFC_FILMS = 17
    FATHOM_EVENTS = 18
    OPEN_ROAD = 19
    STX = 20
    SONY_CLASSICS = 21
    CRUNCHYROLL = 22
    UNITED_ARTISTS_RELEASING = 23
    TWENTIETH_CENTURY_FOX = 24

    @classmethod
    def labels(cls) -> dict:
        return {
            cls.DISNEY: "Walt Disney Studios Motion Pictures",
            cls.WARNER_BROS: "Warner Bros.",
            cls.UNIVERSAL: "Universal Pictures",
            cls.SONY: "Sony Pictures Entertainment (SPE)",
            cls.PARAMOUNT: "Paramount Pictures",
            cls.TWENTIETH_CENTURY: "20th Century Studios",
            cls.LIONSGATE: "Lionsgate",
            cls.AMAZON_MGM: "Amazon MGM Studios",
            cls.MGM: "Metro-Goldwyn-Mayer (MGM)",
            cls.A24: "A24",
            cls.NEON: "Neon",
            cls.FOCUS_FEATURES: "Focus Features",
            cls.SEARCHLIGHT: "Searchlight Pictures",
            cls.ANGEL_STUDIOS: "Angel Studios",
            cls.ROADSIDE_ATTRACTIONS: "Roadside Attractions",
            cls.BLEECKER_STREET: "Bleecker Street Media",
            cls.IFC_FILMS: "IFC Films",
            cls.FATHOM_EVENTS: "Fathom Events",
            cls.OPEN_ROAD: "Open Road Films (II)",
            cls.STX: "STX Entertainment",
            cls.SONY_CLASSICS: "Sony Pictures Classics",
            cls.CRUNCHYROLL: "Crunchyroll",
            cls.UNITED_ARTISTS_RELEASING: "United Artists Releasing",
            cls.TWENTIETH_CENTURY_FOX: "Twentieth Century Fox",
        }


class RoleKind(LabeledEnum):
    ACTOR = 1
    DIRECTOR = 2
    WRITER = 3
    PRODUCER = 4
    COMPOSER = 5
    CINEMATOGRAPHER = 6
    SHOWRUNNER = 7

    @classmethod
    def labels(cls) -> dict:
        return {
            cls.ACTOR: "Actor",
            cls.DIRECTOR: "Director",
            cls.WRITER: "Writer",
            cls.PRODUCER: "Producer",
            cls.COMPOSER: "Composer",
            cls.CINEMATOGRAPHER: "Cinematographer",
            cls.SHOWRUNNER: "Showrunner",
        }


class ContentType(LabeledEnum):
    MOVIE = 1
    SERIES = 2

    @classmethod
    def labels(cls) -> dict:
        return {
            cls.MOVIE: "Movie",
            cls.SERIES: "Series",
        }


# --- Per-title value objects (frozen once built) ---

class GrossBreakdown(BaseModel):
    """Lifetime gross by market.  Any part may be missing; no sum invariant."""
    model_config = ConfigDict(frozen=True)

    domestic: Optional[int] = Field(default=None, ge=0)
    international: Optional[int] = Field(default=None, ge=0)
    worldwide: Optional[int] = Field(default=None, ge=0)


class Credit(BaseModel):
    """One person credited on a title page."""
    model_config = ConfigDict(frozen=True)

    person_name: str
    person_uri: str
    role_kind: RoleKind
    character_name: Optional[str] = None    # Actors only
    portrait_uri: Optional[str] = None

    @field_serializer("role_kind", when_used="json")
    def _role_label(self, role_kind: RoleKind) -> str:
        return role_kind.label


class TitleDetail(BaseModel):
    """
    Fully merged record for one title.

    Built in one step from the release page, the listing-site title page and
    the detail-service page; never exposed half-filled.
    """
    model_config = ConfigDict(frozen=True)

    canonical_pro_uri: str
    canonical_listing_uri: str
    display_title: str = ""
    poster_uri: str = ""
    synopsis: str = ""
    release_date: Optional[date] = None
    certificate: str = ""
    runtime_minutes: int = Field(default=0, ge=0)
    genres: tuple[Genre, ...] = ()
    content_type: ContentType = ContentType.MOVIE
    season_count: int = Field(default=0, ge=0)
    # None means the page did not say; 0 would be a claim
    opening_gross: Optional[int] = Field(default=None, ge=0)
    opening_theater_count: Optional[int] = Field(default=None, ge=0)
    widest_theater_count: Optional[int] = Field(default=None, ge=0)
    budget: Optional[int] = Field(default=None, ge=0)
    gross_breakdown: Optional[GrossBreakdown] = None
    credits: tuple[Credit, ...] = ()
    distributor: Optional[Distributor] = None
    international_release_note: Optional[str] = None

    @field_serializer("genres", when_used="json")
    def _genre_labels(self, genres: tuple[Genre, ...]) -> list[str]:
        return [genre.label for genre in genres]

    @field_serializer("content_type", "distributor", when_used="json")
    def _enum_label(self, member: Optional[LabeledEnum]) -> Optional[str]:
        return member.label if member is not None else None


# --- Listing output ---

class RankedRelease(BaseModel):
    """One ranked row of a listing page; a stub until its detail is attached."""
    rank: int = Field(ge=1)
    previous_rank: int = Field(default=0, ge=0)    # 0 = not ranked last period
    title: str
    cross_reference_uri: str = ""
    period_gross: int = Field(default=0, ge=0)
    cumulative_gross: int = Field(default=0, ge=0)
    theater_count: int = Field(default=0, ge=0)
    weeks_in_release: int = Field(default=0, ge=0)
    detail: Optional[TitleDetail] = None

    def attach_detail(self, detail: TitleDetail) -> None:
        """Attach the enriched record.  A stub is enriched exactly once."""
        if self.detail is not None:
            raise ValueError(f"Detail already attached to rank {self.rank} ({self.title})")
        self.detail = detail


class ReleaseBatch(BaseModel):
    """Output of a listing run: page title plus releases in rank order."""
    title: str
    releases: list[RankedRelease] = Field(default_factory=list)


# --- Intermediate contracts of the detail extractor ---

class ReleaseSummary(BaseModel):
    """Financial summary block of a release page."""
    title_path: str
    distributor: Optional[Distributor] = None
    opening_gross: Optional[int] = None
    opening_theater_count: Optional[int] = None
    budget: Optional[int] = None
    widest_theater_count: Optional[int] = None
    release_date: Optional[date] = None


class TitlePage(BaseModel):
    """Everything read from a detail-service title page."""
    display_title: str = ""
    poster_uri: str = ""
    synopsis: str = ""
    certificate: str = ""
    runtime_minutes: int = 0
    genres: list[Genre] = Field(default_factory=list)
    content_type: ContentType = ContentType.MOVIE
    season_count: int = 0
    credits: list[Credit] = Field(default_factory=list)
    international_release_note: Optional[str] = None


# --- Request descriptors ---
# Built once and handed to the orchestrator; the "kind" tag makes the union
# parseable from plain dicts as well.

class WeekendRequest(BaseModel):
    """Top weekend releases, e.g. weekend_id="2024W29"."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["weekend"] = "weekend"
    weekend_id: str

    @property
    def url(self) -> str:
        return WEEKEND_URL.format(weekend_id=self.weekend_id)


class YearRequest(BaseModel):
    """Top domestic releases of a calendar year."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["year"] = "year"
    year: int = Field(ge=1977)

    @property
    def url(self) -> str:
        return YEAR_URL.format(year=self.year)


class SourceRequest(BaseModel):
    """A single detail-service title page, parsed on its own."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["source"] = "source"
    source_url: str

    @property
    def url(self) -> str:
        return self.source_url


ParseRequest = Union[WeekendRequest, YearRequest, SourceRequest]
