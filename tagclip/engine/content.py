"""Pure text helpers over captured content."""

import math
import re
from typing import List
from urllib.parse import urlsplit


_WORD_SPLIT = re.compile(r'\s+')
_PARAGRAPH_SPLIT = re.compile(r'\n\s*\n')

DEFAULT_WORDS_PER_MINUTE = 200


def _split_url(url: str):
    parts = urlsplit(url.strip())
    if not parts.netloc and "://" not in url:
        # "example.com/path" has no scheme; read it as host + path
        parts = urlsplit("//" + url.strip())
    return parts


def extract_domain(url: str) -> str:
    """Hostname without a leading www. Unparsable input comes back as-is."""
    try:
        host = _split_url(url).hostname
    except ValueError:
        return url
    if not host:
        return url
    return host[4:] if host.startswith("www.") else host


def extract_domain_and_path(url: str) -> str:
    """Lower-cased host (no www.) joined with the path, trailing slash removed."""
    try:
        parts = _split_url(url)
        host = parts.hostname
    except ValueError:
        return url.lower()
    if not host:
        return url.lower()
    if host.startswith("www."):
        host = host[4:]
    path = parts.path.rstrip("/")
    return f"{host}{path}".lower()


def count_words(text: str) -> int:
    if not text:
        return 0
    return len([w for w in _WORD_SPLIT.split(text.strip()) if w])


def calculate_reading_time(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimated reading time in whole minutes, rounded up."""
    return math.ceil(count_words(text) / words_per_minute)


def split_paragraphs(text: str) -> List[str]:
    if not text:
        return []
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]


def extract_path(url: str) -> str:
    """URL path without trailing slash, original case."""
    try:
        parts = _split_url(url)
    except ValueError:
        return ""
    if not parts.hostname:
        return ""
    return parts.path.rstrip("/")
