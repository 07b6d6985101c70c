"""
Turning cached page bytes into parse trees.

Both source sites serve UTF-8 today, but the cache stores bytes verbatim, so
decoding follows the charset the page itself declares (with the same remaps
browsers apply).  Parsing goes through a fallback chain so a parser bug on
one odd page does not sink the run.
"""

import re

from bs4 import BeautifulSoup

from .logger import get_module_logger

logger = get_module_logger("documents")

# WHATWG Encoding Standard: browsers silently remap these charsets.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
}

META_CHARSET = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)


def detect_charset_from_bytes(raw_bytes: bytes) -> str:
    """
    Find the charset declared by a <meta> tag in the first 2048 bytes.

    Returns the browser-equivalent charset, or 'utf-8' when nothing usable
    is declared.
    """
    head = raw_bytes[:2048].decode('ascii', errors='ignore')
    match = META_CHARSET.search(head)
    if not match:
        return 'utf-8'

    charset = match.group(1).strip().lower()
    charset = WHATWG_CHARSET_MAP.get(charset, charset)
    try:
        ''.encode(charset)
    except LookupError:
        logger.warning(f"Unknown declared charset '{charset}', decoding as utf-8")
        return 'utf-8'
    return charset


def decode_page(raw_bytes: bytes) -> str:
    """Decode page bytes with the charset the page declares."""
    return raw_bytes.decode(detect_charset_from_bytes(raw_bytes), errors='replace')


def make_soup(html: str) -> BeautifulSoup:
    """
    Parse HTML into a BeautifulSoup tree with <br> elements removed.

    Parser fallback chain: html5lib → lxml → html.parser.  html5lib builds
    the same tree a browser would, which keeps child-element counts on the
    detail pages stable; the others are only used if it blows up.
    """
    try:
        soup = BeautifulSoup(html, 'html5lib')
    except Exception as e:
        logger.warning(f"html5lib parsing failed, trying lxml: {e}")
        try:
            soup = BeautifulSoup(html, 'lxml')
        except Exception as e2:
            logger.warning(f"lxml parsing also failed: {e2}")
            soup = BeautifulSoup(html, 'html.parser')

    # Line breaks split label/value text into extra nodes on the summary pages
    for br in soup.find_all('br'):
        br.decompose()

    return soup
