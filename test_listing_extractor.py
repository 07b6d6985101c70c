"""Tests for ListingExtractor on weekend and yearly ranking pages."""

import pytest

from boxoffice_parser.exceptions import RequiredElementMissing
from boxoffice_parser.listing_extractor import ListingExtractor, parse_amount


@pytest.fixture
def weekend_batch(load_sample):
    return ListingExtractor.weekend().extract(load_sample("weekend.html"))


@pytest.fixture
def year_batch(load_sample):
    return ListingExtractor.yearly(2024).extract(load_sample("year.html"))


@pytest.mark.parametrize("text, expected", [
    ("$10,000,000", 10000000),
    ("3,500", 3500),
    (" 2 ", 2),
    ("4,151 theaters", 4151),
    ("-", 0),
    ("-12", 0),
    ("new", 0),
    ("", 0),
])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_weekend_first_row(weekend_batch):
    first = weekend_batch.releases[0]

    assert first.rank == 1
    assert first.previous_rank == 1
    assert first.title == "Film A"
    assert first.cross_reference_uri.endswith("/release/tt1/")
    assert first.cross_reference_uri == "https://www.boxofficemojo.com/release/tt1/"
    assert first.period_gross == 10000000
    assert first.theater_count == 3500
    assert first.cumulative_gross == 25000000
    assert first.weeks_in_release == 2
    assert first.detail is None


def test_weekend_ranks_are_dense_and_ordered(weekend_batch):
    assert [r.rank for r in weekend_batch.releases] == [1, 2, 3]


def test_malformed_row_is_dropped(weekend_batch):
    assert all(r.title != "Broken row" for r in weekend_batch.releases)


def test_missing_values_become_zero(weekend_batch):
    second, third = weekend_batch.releases[1], weekend_batch.releases[2]

    assert second.previous_rank == 0
    assert third.theater_count == 0
    assert third.cross_reference_uri == ""
    for release in weekend_batch.releases:
        assert release.period_gross >= 0
        assert release.cumulative_gross >= 0
        assert release.theater_count >= 0


def test_only_site_relative_links_are_cross_references(weekend_batch):
    assert weekend_batch.releases[1].cross_reference_uri == "https://www.boxofficemojo.com/release/tt2/"


def test_weekend_page_title(weekend_batch):
    assert weekend_batch.title == "July 19-21, 2024"


def test_weekend_limit_truncates():
    rows = "".join(
        f"<tr><td>{rank}</td><td><a href='/release/rl{rank}/'>Film {rank}</a></td><td>${rank},000</td></tr>"
        for rank in range(12, 0, -1)
    )
    html = (f"<html><body><h1>Weekend</h1><h4>Jan 3-5, 2025</h4><div id='table'><table>"
            f"<tr><th>Rank</th><th>Release</th><th>Gross</th></tr>{rows}</table></div></body></html>")

    batch = ListingExtractor.weekend().extract(html)

    assert [r.rank for r in batch.releases] == list(range(1, 11))
    assert batch.title == "Jan 3-5, 2025"


def test_unknown_headers_are_ignored():
    html = ("<html><body><div id='table'><table>"
            "<tr><th>Rank</th><th>Mystery Column</th><th>Release</th></tr>"
            "<tr><td>1</td><td>999</td><td>Only Film</td></tr>"
            "</table></div></body></html>")

    release = ListingExtractor.weekend().extract(html).releases[0]

    assert release.title == "Only Film"
    assert release.period_gross == 0
    assert release.weeks_in_release == 0


def test_year_rows_sorted_and_zeroed(year_batch):
    assert [r.rank for r in year_batch.releases] == [1, 2]
    assert year_batch.releases[0].title == "Film A"
    assert year_batch.releases[0].period_gross == 636745858

    for release in year_batch.releases:
        assert release.theater_count == 0
        assert release.weeks_in_release == 0
        assert release.previous_rank == 0
        assert release.cumulative_gross == 0


def test_year_title_is_synthesized(year_batch):
    assert year_batch.title == "Domestic Box Office For 2024"


def test_year_cross_reference_drops_query(year_batch):
    assert year_batch.releases[1].cross_reference_uri == "https://www.boxofficemojo.com/release/rl200/"


def test_missing_table_is_fatal():
    with pytest.raises(RequiredElementMissing) as excinfo:
        ListingExtractor.weekend().extract("<html><body><h1>Nothing</h1></body></html>")
    assert excinfo.value.element == "#table"


def listing_html(header, rows):
    head = "".join(f"<th>{label}</th>" for label in header)
    body = "".join("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows)
    return (f"<html><body><h1>Weekend</h1><h4>Jan 3-5, 2025</h4><div id='table'><table>"
            f"<tr>{head}</tr>{body}</table></div></body></html>")


def test_table_without_rank_column_ranks_by_position():
    html = listing_html(
        ["LW", "Release", "Gross", "Theaters", "Total Gross", "Weeks"],
        [
            ["1", "<a href='/release/tt1/'>Film A</a>", "$10,000,000", "3,500", "$25,000,000", "2"],
            ["-", "<a href='/release/tt2/'>Film B</a>", "$8,250,500", "2,900", "$8,250,500", "1"],
            ["2", "Film C", "$1,200", "-", "$40,100,000", "4"],
        ],
    )

    batch = ListingExtractor.weekend().extract(html)

    assert [(r.rank, r.title) for r in batch.releases] == [(1, "Film A"), (2, "Film B"), (3, "Film C")]
    first = batch.releases[0]
    assert first.previous_rank == 1
    assert first.cross_reference_uri.endswith("/release/tt1/")
    assert first.period_gross == 10000000
    assert first.theater_count == 3500
    assert first.cumulative_gross == 25000000
    assert first.weeks_in_release == 2


def test_tied_and_skipped_ranks_are_renumbered():
    html = listing_html(
        ["Rank", "Release"],
        [["4", "Film 3"], ["1", "Film 0"], ["2", "Film 1"], ["2", "Film 2"]],
    )

    batch = ListingExtractor.weekend().extract(html)

    assert [(r.rank, r.title) for r in batch.releases] == [
        (1, "Film 0"), (2, "Film 1"), (3, "Film 2"), (4, "Film 3"),
    ]


def test_rows_without_usable_rank_follow_ranked_rows():
    html = listing_html(
        ["Rank", "Release"],
        [["-", "Unranked"], ["2", "Second"], ["1", "First"]],
    )

    batch = ListingExtractor.weekend().extract(html)

    assert [(r.rank, r.title) for r in batch.releases] == [(1, "First"), (2, "Second"), (3, "Unranked")]


def test_limit_applies_to_dense_ranks():
    rows = [[str(rank * 5), f"Film {rank}"] for rank in range(1, 15)]

    batch = ListingExtractor.weekend().extract(listing_html(["Rank", "Release"], rows))

    assert [r.rank for r in batch.releases] == list(range(1, 11))
    assert batch.releases[-1].title == "Film 10"
