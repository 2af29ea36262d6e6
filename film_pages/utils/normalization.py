"""Normalization utilities for titles and page paths."""

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Lowercase a title and replace every run of whitespace with a single hyphen.

    Titles that differ only in case or whitespace style map to the same slug.
    """
    return _WHITESPACE_RUN.sub("-", title.lower())


def normalize_page_path(path: str) -> str:
    """Strip surrounding slashes so '/', '' and '/a-new-hope/' map onto output directories."""
    return path.strip().strip("/")
