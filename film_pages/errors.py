"""Exceptions raised while building the site."""

from typing import Any, Dict, List


class FilmPagesError(Exception):
    """Base exception for build failures."""


class QueryFailure(FilmPagesError):
    """Raised when an aggregated query returned one or more errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = list(errors)
        messages = "; ".join(str(error.get("message", error)) for error in self.errors)
        super().__init__(f"Query failed with {len(self.errors)} error(s): {messages}")


class SourceError(FilmPagesError):
    """Raised when a data source cannot be reached or is misconfigured."""


class TemplateContractError(FilmPagesError):
    """Raised when a page context does not match its component's declared parameters."""


class QuerySyntaxError(FilmPagesError):
    """Raised when a query cannot be split into top-level fields."""


class PagePathError(FilmPagesError):
    """Raised when a page path would escape the output directory or replace the site index."""
