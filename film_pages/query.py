"""Aggregated query endpoint over all configured data sources."""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import aiohttp
from pydantic import BaseModel, Field

from .config import SiteConfig
from .errors import QueryFailure, QuerySyntaxError, SourceError
from .graphql import ParsedQuery, QueryField, parse_query
from .sources.base import DataSource, SourceResult
from .sources.pixabay import PixabaySource
from .sources.swapi import SwapiSource


logger = logging.getLogger(__name__)


class QueryResult(BaseModel):
    """Outcome of a query: merged ``data`` or a non-empty list of ``errors``."""

    data: Optional[Dict[str, Any]] = Field(default=None, description="Merged results keyed by top-level field")
    errors: List[Dict[str, Any]] = Field(default_factory=list, description="GraphQL-style error descriptors")

    def raise_for_errors(self) -> "QueryResult":
        """Raise QueryFailure if the query produced any errors, otherwise return self."""
        if self.errors:
            raise QueryFailure(self.errors)
        return self


class DataLayer:
    """Route each top-level field of a query to the source that owns it and merge the results."""

    def __init__(self, sources: Sequence[DataSource]):
        self._routes: Dict[str, DataSource] = {}
        for source in sources:
            for name in source.field_names:
                if name in self._routes:
                    raise ValueError(f"Query field '{name}' is claimed by more than one source")
                self._routes[name] = source

    @classmethod
    def from_config(cls, config: SiteConfig, session: aiohttp.ClientSession) -> "DataLayer":
        """Mount the GraphQL film source and the Pixabay photo source."""
        return cls([
            PixabaySource(
                session,
                api_key=config.pixabay_api_key,
                search_term=config.pixabay_query,
                api_url=config.pixabay_url,
            ),
            SwapiSource(
                session,
                url=config.swapi_url,
                type_name=config.swapi_type_name,
                field_name=config.swapi_field_name,
            ),
        ])

    async def _resolve_field(
        self,
        field: QueryField,
        parsed: ParsedQuery,
        variables: Mapping[str, Any],
    ) -> SourceResult:
        source = self._routes.get(field.name)
        if source is None:
            return SourceResult(errors=[{"message": f'Cannot query field "{field.name}" on type "Query".'}])
        try:
            return await source.resolve(field, parsed, variables)
        except SourceError as e:
            logger.error("Source for '%s' failed: %s", field.name, e)
            return SourceResult(errors=[{"message": str(e), "path": [field.response_key]}])

    async def query(self, query: str, variables: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """
        Run a composed query against every source it touches.

        Args:
            query: Query text whose top-level fields name mounted sources
            variables: Values for the operation's variables

        Returns:
            QueryResult with merged data, or with errors if any field failed
        """
        variables = dict(variables or {})

        try:
            parsed = parse_query(query)
        except QuerySyntaxError as e:
            return QueryResult(errors=[{"message": f"Syntax Error: {e}"}])

        missing = [name for name in parsed.required_variables() if variables.get(name) is None]
        if missing:
            return QueryResult(errors=[
                {"message": f'Variable "${name}" of required type was not provided.'}
                for name in missing
            ])

        results = await asyncio.gather(*[
            self._resolve_field(field, parsed, variables) for field in parsed.fields
        ])

        data: Dict[str, Any] = {}
        errors: List[Dict[str, Any]] = []
        for field, result in zip(parsed.fields, results):
            data[field.response_key] = result.data
            errors.extend(result.errors)

        if errors:
            logger.debug("Query returned %d error(s): %s", len(errors), errors)
        return QueryResult(data=data, errors=errors)
