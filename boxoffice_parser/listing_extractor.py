"""
Ranking table extractor for weekend and yearly listing pages.

Input:  listing page HTML
Output: ReleaseBatch with RankedRelease stubs in rank order (no details yet)

Cells are matched to fields by their column header text, never by position,
so a column added or moved by the site does not shift values into the wrong
field.  Headers we do not know are ignored.
"""

import re
from typing import Callable, Optional
from urllib.parse import urlparse

from .config import LISTING_DOMAIN, WEEKEND_LIMIT, YEAR_LIMIT
from .documents import make_soup
from .exceptions import RequiredElementMissing
from .schemas import RankedRelease, ReleaseBatch
from .logger import get_module_logger

logger = get_module_logger("listing_extractor")

LEADING_INT = re.compile(r'-?\d+')

# Columns the yearly page never fills; always reported as 0 there
YEARLY_ZEROED = ('previous_rank', 'theater_count', 'weeks_in_release', 'cumulative_gross')


def parse_amount(text: str) -> int:
    """
    Parse a currency or count cell: "$10,000,000" → 10000000, "3,500" → 3500.

    '$' and thousands separators are stripped and any unit suffix after the
    number is ignored.  Unparseable or non-positive values ("-", "new", "")
    become 0.
    """
    cleaned = text.replace('$', '').replace(',', '').strip()
    match = LEADING_INT.match(cleaned)
    if not match:
        return 0
    return max(int(match.group()), 0)


def _amount(field: str) -> Callable:
    def setter(fields: dict, cell) -> None:
        fields[field] = parse_amount(cell.get_text())
    return setter


def _release(fields: dict, cell) -> None:
    """Title text, plus the first site-relative link as the cross-reference."""
    fields['title'] = cell.get_text().strip()
    for anchor in cell.find_all('a', href=True):
        href = urlparse(anchor['href'])
        if not href.netloc and href.path:
            fields['cross_reference_uri'] = LISTING_DOMAIN + href.path
            break


# Recognized columns, applied in this order to each row
COLUMN_HANDLERS = (
    ("Rank", _amount('source_rank')),
    ("LW", _amount('previous_rank')),
    ("Release", _release),
    ("Gross", _amount('period_gross')),
    ("Theaters", _amount('theater_count')),
    ("Total Gross", _amount('cumulative_gross')),
    ("Weeks", _amount('weeks_in_release')),
)


class ListingExtractor:
    """Extracts the ranked releases of one listing page."""

    def __init__(self, limit: int = WEEKEND_LIMIT, year: Optional[int] = None):
        """
        Args:
            limit: highest rank kept
            year: set for yearly pages; zeroes the columns yearly pages lack
                  and replaces the page title
        """
        self.limit = limit
        self.year = year

    @classmethod
    def weekend(cls) -> "ListingExtractor":
        return cls(limit=WEEKEND_LIMIT)

    @classmethod
    def yearly(cls, year: int) -> "ListingExtractor":
        return cls(limit=YEAR_LIMIT, year=year)

    def extract(self, html: str) -> ReleaseBatch:
        """
        Extract the batch from listing page HTML.

        Raises:
            RequiredElementMissing: if the results table container is absent
        """
        soup = make_soup(html)

        container = soup.find(id='table')
        if container is None:
            raise RequiredElementMissing('#table', page='listing page')

        rows = []
        for table in container.find_all('table'):
            rows.extend(self._read_rows(table))

        # The source Rank cell only orders rows: ties keep document order and
        # rows without a usable rank follow the ranked ones.  Batch ranks are
        # then assigned by position so they are always 1..N.
        rows.sort(key=lambda fields: fields.get('source_rank') or float('inf'))

        releases = []
        for rank, fields in enumerate(rows[:self.limit], start=1):
            if fields.get('source_rank', rank) != rank:
                logger.debug(f"Row {fields.get('title', '')!r} listed as {fields.get('source_rank')}, ranked {rank}")
            if self.year is not None:
                fields.update({name: 0 for name in YEARLY_ZEROED})
            releases.append(RankedRelease(
                rank=rank,
                previous_rank=fields.get('previous_rank', 0),
                title=fields.get('title', ''),
                cross_reference_uri=fields.get('cross_reference_uri', ''),
                period_gross=fields.get('period_gross', 0),
                cumulative_gross=fields.get('cumulative_gross', 0),
                theater_count=fields.get('theater_count', 0),
                weeks_in_release=fields.get('weeks_in_release', 0),
            ))

        if self.year is not None:
            title = f"Domestic Box Office For {self.year}"
        else:
            title = self._page_title(soup)

        logger.info(f"Extracted {len(releases)} releases from '{title}'")
        return ReleaseBatch(title=title, releases=releases)

    def _read_rows(self, table) -> list[dict]:
        """Zip each body row with the header labels and apply the column handlers."""
        header = []
        parsed = []

        for tr in table.find_all('tr'):
            header.extend(th.get_text().strip() for th in tr.find_all('th'))
            cells = tr.find_all('td')

            # Header-only rows and malformed rows fall out here
            if not cells or len(cells) != len(header):
                continue

            by_label = dict(zip(header, cells))
            fields = {}
            for label, setter in COLUMN_HANDLERS:
                if label in by_label:
                    setter(fields, by_label[label])
            parsed.append(fields)

        return parsed

    def _page_title(self, soup) -> str:
        """First text node of the element after the first <h1>, else the <h1> text."""
        heading = soup.find('h1')
        if heading is None:
            return ""

        sibling = heading.find_next_sibling()
        if sibling is not None and sibling.contents:
            first = sibling.contents[0]
            text = first.get_text() if hasattr(first, 'get_text') else str(first)
            if text.strip():
                return text.strip()

        return heading.get_text().strip()
