"""Tests for Fetcher and page decoding; requests.Session is mocked out."""

from unittest.mock import MagicMock

import pytest
import requests

from boxoffice_parser.documents import decode_page, detect_charset_from_bytes, make_soup
from boxoffice_parser.exceptions import FetchFailed
from boxoffice_parser.fetcher import Fetcher

URL = "https://www.boxofficemojo.com/weekend/2024W29/"


def make_session(response=None, error=None):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return session


def test_fetch_returns_body_bytes():
    response = MagicMock()
    response.status_code = 200
    response.content = b"<html>ok</html>"
    session = make_session(response)

    assert Fetcher(timeout=5, session=session).fetch(URL) == b"<html>ok</html>"
    session.get.assert_called_once_with(URL, timeout=5)
    assert "User-Agent" in session.headers


def test_http_error_becomes_fetch_failed():
    response = MagicMock()
    response.status_code = 503
    response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")

    with pytest.raises(FetchFailed) as excinfo:
        Fetcher(session=make_session(response)).fetch(URL)

    assert excinfo.value.url == URL
    assert "503" in excinfo.value.message


def test_transport_error_is_not_retried():
    session = make_session(error=requests.ConnectionError("Name or service not known"))

    with pytest.raises(FetchFailed):
        Fetcher(session=session).fetch(URL)
    assert session.get.call_count == 1


def test_detect_charset():
    assert detect_charset_from_bytes(b'<meta charset="utf-8">') == "utf-8"
    assert detect_charset_from_bytes(b'<meta charset="ISO-8859-1">') == "windows-1252"
    assert detect_charset_from_bytes(b'<meta charset="no-such-charset">') == "utf-8"
    assert detect_charset_from_bytes(b"<html></html>") == "utf-8"


def test_decode_page_uses_declared_charset():
    raw = '<html><head><meta charset="windows-1252"></head><body>Amélie</body></html>'.encode("windows-1252")
    assert "Amélie" in decode_page(raw)


def test_make_soup_drops_line_breaks():
    soup = make_soup("<div id='x'>4,151<br>theaters</div>")
    assert soup.find("br") is None
    assert soup.find(id="x").get_text() == "4,151theaters"
