"""
Per-title detail extractor.

Three documents describe one title:
  (a) the listing site's release page: financial summary block, plus the
      refiner link that names the title ("/title/tt1234567/")
  (b) the listing site's title page: lifetime gross by market
  (c) the detail service's title page: poster, synopsis, type, runtime,
      genres, crew, cast, seasons, international release note

Each document has a few structural anchors that must be present (a missing
one raises RequiredElementMissing); every other field is optional and simply
resolves to None or an empty value when the page does not carry it.

The orchestrator reads (a) first, because the title path inside it is what
locates (b) and (c).
"""

import re
from datetime import date, datetime
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .config import DEFAULT_CAST_LIMIT, PRO_DOMAIN
from .documents import make_soup
from .exceptions import RequiredElementMissing
from .schemas import (
    ContentType, Credit, Distributor, Genre, GrossBreakdown, ReleaseSummary,
    RoleKind, TitleDetail, TitlePage,
)
from .logger import get_module_logger

logger = get_module_logger("detail_extractor")

DIGITS = re.compile(r'\d+')

DATE_FORMATS = [
    "%b %d, %Y",   # "Jul 19, 2024"
    "%B %d, %Y",   # "July 19, 2024"
    "%b %d %Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
]

SERIES_LABELS = ("TV Series", "TV Mini-series")

# Crew containers on the detail page, in the order credits are emitted
CREW_CONTAINERS = (
    (RoleKind.DIRECTOR, 'director_summary'),
    (RoleKind.WRITER, 'writer_summary'),
    (RoleKind.PRODUCER, 'producer_summary'),
    (RoleKind.COMPOSER, 'composer_summary'),
    (RoleKind.CINEMATOGRAPHER, 'cinematographer_summary'),
)

INTL_RELEASE_QUERY = 'ref_=tt_pub_intl_release_summary'


# --- Small text helpers ---

def parse_optional_amount(text: Optional[str]) -> Optional[int]:
    """"$1,234" → 1234; None when no number is present."""
    if not text:
        return None
    match = DIGITS.match(text.replace('$', '').replace(',', '').strip())
    return int(match.group()) if match else None


def parse_release_date(text: str) -> Optional[date]:
    """
    Normalize the release-date value of a summary block.

    "Jul 19, 2024 (Domestic)" → date before the qualifier;
    "Jul 19, 2024 - Aug 1, 2024" → date before the dash.
    """
    parts = text.split('(')
    if len(parts) == 2:
        date_text = parts[0]
    else:
        date_text = text.split('-')[0]
    date_text = ' '.join(date_text.split())

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable release date: {text!r}")
    return None


def canonical_image(src: str) -> str:
    """
    Drop the sizing suffix from a CDN image URL.

    ".../M/MV5BMTk@._V1_UX67_CR0,0,67,98_AL_.jpg" → ".../M/MV5BMTk@"
    """
    src = src.strip()
    name = src.rsplit('/', 1)[-1]
    stem = name.replace('.jpg', '').split('.')[0]
    return src.replace(name, stem)


def _text(element) -> str:
    return element.get_text().strip() if element is not None else ""


def _require(soup: BeautifulSoup, element_id: str, page: str):
    element = soup.find(id=element_id)
    if element is None:
        raise RequiredElementMissing(f"#{element_id}", page=page)
    return element


class TitleDetailExtractor:
    """Parses the three per-title documents and merges them into a TitleDetail."""

    def __init__(self, cast_limit: int = DEFAULT_CAST_LIMIT):
        self.cast_limit = cast_limit

    def extract(
        self,
        release_html: str,
        title_html: str,
        pro_html: str,
        listing_uri: str
    ) -> TitleDetail:
        """Build a TitleDetail when all three documents are already at hand."""
        summary = self.parse_release_summary(release_html)
        return self.build_detail(
            page=self.parse_title(pro_html),
            pro_uri=PRO_DOMAIN + summary.title_path,
            listing_uri=listing_uri,
            summary=summary,
            gross=self.parse_gross_breakdown(title_html),
        )

    def build_detail(
        self,
        page: TitlePage,
        pro_uri: str,
        listing_uri: str,
        summary: Optional[ReleaseSummary] = None,
        gross: Optional[GrossBreakdown] = None
    ) -> TitleDetail:
        """Merge parsed documents into one frozen record."""
        summary = summary or ReleaseSummary(title_path="")

        return TitleDetail(
            canonical_pro_uri=pro_uri,
            canonical_listing_uri=listing_uri,
            display_title=page.display_title,
            poster_uri=page.poster_uri,
            synopsis=page.synopsis,
            release_date=summary.release_date,
            certificate=page.certificate,
            runtime_minutes=page.runtime_minutes,
            genres=page.genres,
            content_type=page.content_type,
            season_count=page.season_count,
            opening_gross=summary.opening_gross,
            opening_theater_count=summary.opening_theater_count,
            widest_theater_count=summary.widest_theater_count,
            budget=summary.budget,
            gross_breakdown=gross,
            credits=page.credits,
            distributor=summary.distributor,
            international_release_note=page.international_release_note,
        )

    # --- (a) release page ---

    def parse_release_summary(self, html: str) -> ReleaseSummary:
        """
        Read the labelled key/value block and the title refiner link.

        Raises:
            RequiredElementMissing: if the summary block or refiner is absent
        """
        soup = make_soup(html)
        page = "release page"

        discloser = _require(soup, 'mojo-summary-details-discloser', page)
        block = discloser.find_next_sibling()
        if block is None:
            raise RequiredElementMissing("summary values after #mojo-summary-details-discloser", page=page)

        values = {}
        for row in block.find_all(recursive=False):
            # Label/value rows have exactly two children: <span>Label</span><span>Value</span>
            if len(row.find_all(recursive=False)) != 2:
                continue
            spans = row.find_all('span')
            if len(spans) < 2:
                continue
            label, value = spans[0].get_text().strip(), spans[1]

            if label == 'Distributor':
                # Value is followed by a "See full company information" link
                for anchor in value.find_all('a'):
                    anchor.extract()
                values['distributor'] = Distributor.from_label(value.get_text())

            elif label == 'Opening':
                for money in row.find_all('span', class_='money'):
                    values['opening_gross'] = parse_optional_amount(money.get_text())
                    money.extract()
                values['opening_theater_count'] = self._first_positive_token(value.get_text())

            elif label == 'Budget':
                for money in row.find_all('span', class_='money'):
                    values['budget'] = parse_optional_amount(money.get_text())

            elif label == 'Widest Release':
                values['widest_theater_count'] = parse_optional_amount(
                    value.get_text().replace(' theaters', ''))

            elif label.split('(')[0].strip() == 'Release Date':
                values['release_date'] = parse_release_date(value.get_text())

        refiner = _require(soup, 'title-summary-refiner', page)
        anchor = refiner.find('a', href=True)
        if anchor is None:
            raise RequiredElementMissing("#title-summary-refiner a", page=page)

        return ReleaseSummary(title_path=urlparse(anchor['href']).path, **values)

    @staticmethod
    def _first_positive_token(text: str) -> Optional[int]:
        """"3,611 theaters" → 3611"""
        for token in text.split():
            digits = token.replace(',', '')
            if DIGITS.fullmatch(digits) and int(digits) > 0:
                return int(digits)
        return None

    # --- (b) listing-site title page ---

    def parse_gross_breakdown(self, html: str) -> Optional[GrossBreakdown]:
        """Domestic / international / worldwide, in that order; None without the table."""
        soup = make_soup(html)

        table = soup.find('div', class_='mojo-performance-summary-table')
        if table is None:
            logger.debug("No performance summary table on title page")
            return None

        amounts = []
        for row in table.find_all('div', recursive=False):
            money = row.find('span', class_='money')
            amounts.append(parse_optional_amount(money.get_text()) if money else None)
        amounts.extend([None] * 3)

        return GrossBreakdown(domestic=amounts[0], international=amounts[1], worldwide=amounts[2])

    # --- (c) detail-service title page ---

    def parse_title(self, html: str) -> TitlePage:
        """
        Read the detail-service title page.

        Raises:
            RequiredElementMissing: if the poster, heading, synopsis or cast
                table containers are absent
        """
        soup = make_soup(html)
        page = "detail title page"
        values = {}

        image = _require(soup, 'primary_image', page).find('img', src=True)
        if image is None:
            raise RequiredElementMissing("#primary_image img", page=page)
        values['poster_uri'] = canonical_image(image['src'])

        # A heading with fewer than two children has no metadata row at all
        heading = _require(soup, 'title_heading', page)
        if len(heading.find_all(recursive=False)) == 2:
            if _text(soup.find(id='title_type')) in SERIES_LABELS:
                values['content_type'] = ContentType.SERIES
            values['certificate'] = _text(soup.find(id='certificate'))
            runtime = parse_optional_amount(_text(soup.find(id='running_time')).replace('min', ''))
            values['runtime_minutes'] = runtime or 0
            values['genres'] = self._genres(_text(soup.find(id='genres')))
            values['display_title'] = self._display_title(heading)

        summary = _require(soup, 'title_summary', page)
        for div in summary.find_all('div'):
            div.extract()
        values['synopsis'] = summary.get_text().strip()

        values['credits'] = self._crew(soup) + self._cast(soup, page)
        values['season_count'] = self._season_count(soup)
        values['international_release_note'] = self._international_release_note(soup)

        return TitlePage(**values)

    @staticmethod
    def _display_title(heading) -> str:
        """Last text node of the heading's first grandchild (the year is a nested span)."""
        first = heading.find(recursive=False)
        inner = first.find(recursive=False) if first is not None else None
        if inner is None:
            return ""
        texts = [s.strip() for s in inner.find_all(string=True, recursive=False) if s.strip()]
        return texts[-1] if texts else ""

    @staticmethod
    def _genres(text: str) -> list[Genre]:
        genres = []
        for token in text.split(','):
            genre = Genre.from_label(token)
            if genre is not None and genre not in genres:
                genres.append(genre)
        return genres

    @staticmethod
    def _crew(soup: BeautifulSoup) -> list[Credit]:
        credits = []
        for role, element_id in CREW_CONTAINERS:
            container = soup.find(id=element_id)
            if container is None:
                continue

            people = {}
            for anchor in container.find_all('a', href=True):
                uri = PRO_DOMAIN + urlparse(anchor['href']).path
                for span in anchor.find_all('span'):
                    people[uri] = span.get_text().strip()

            credits.extend(
                Credit(person_name=name, person_uri=uri, role_kind=role)
                for uri, name in people.items()
            )
        return credits

    def _cast(self, soup: BeautifulSoup, page: str) -> list[Credit]:
        table = _require(soup, 'title_cast_sortable_table', page)

        cast = {}
        listed = 0
        for tr in table.find_all('tr'):
            if not tr.has_attr('data-cast-listing-index'):
                continue
            if listed >= self.cast_limit:
                break
            listed += 1

            cell = tr.find('td')
            if cell is None:
                continue

            path = name = ''
            for anchor in cell.find_all('a'):
                if anchor.has_attr('data-tab'):
                    path = urlparse(anchor.get('href', '')).path
                    name = anchor.get_text().strip()
            if not path:
                logger.debug("Cast row without a person link, skipped")
                continue

            entry = cast.setdefault(PRO_DOMAIN + path, {'name': name, 'character': None, 'portrait': None})

            for image in cell.find_all('img'):
                src = image.get('data-src', '').strip()
                if src:
                    entry['portrait'] = canonical_image(src)

            for span in cell.find_all('span', class_='see_more_text_collapsed'):
                entry['character'] = span.get_text().strip()

        return [
            Credit(
                person_name=entry['name'],
                person_uri=uri,
                role_kind=RoleKind.ACTOR,
                character_name=entry['character'],
                portrait_uri=entry['portrait'],
            )
            for uri, entry in cast.items()
        ]

    @staticmethod
    def _season_count(soup: BeautifulSoup) -> int:
        season = soup.find(id='season')
        if season is None:
            return 0

        seasons = 0
        for span in season.find_all('span'):
            if span.get('class') != ['a-declarative']:
                continue
            for anchor in span.find_all('a'):
                number = parse_optional_amount(anchor.get_text())
                if number and number > seasons:
                    seasons = number
        return seasons

    @staticmethod
    def _international_release_note(soup: BeautifulSoup) -> Optional[str]:
        status = soup.find(id='status_summary')
        if status is None:
            return None

        note = None
        for anchor in status.find_all('a', href=True):
            if urlparse(anchor['href']).query == INTL_RELEASE_QUERY:
                note = anchor.get_text().strip().replace('\n', ' ')
        return note
