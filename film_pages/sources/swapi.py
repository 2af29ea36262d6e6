"""GraphQL source that mounts the remote Star Wars API under one query field."""

import asyncio
import logging
from typing import Any, Mapping

import aiohttp

from ..constants.config import SWAPI_FIELD_NAME, SWAPI_TYPE_NAME, SWAPI_URL
from ..errors import SourceError
from ..graphql import ParsedQuery, QueryField
from .base import DataSource, SourceResult


logger = logging.getLogger(__name__)


class SwapiSource(DataSource):
    """Forward the selection under ``field_name`` to a remote GraphQL endpoint."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: str = SWAPI_URL,
        type_name: str = SWAPI_TYPE_NAME,
        field_name: str = SWAPI_FIELD_NAME,
    ):
        self.session = session
        self.url = url
        self.type_name = type_name
        self.field_names = (field_name,)

    def build_document(self, field: QueryField, query: ParsedQuery) -> tuple[str, list[str]]:
        """
        Build the operation sent upstream for a field's selection.

        Only variable definitions referenced inside the selection are carried
        over, since GraphQL servers reject unused variables.

        Returns:
            Tuple of (document, names of variables it uses)
        """
        used = query.variables_used_by(field.selection)
        body = f"{{ {field.selection} }}"
        if not used:
            return body, used
        definitions = ", ".join(query.variable_definitions[name] for name in used)
        return f"query({definitions}) {body}", used

    async def resolve(
        self,
        field: QueryField,
        query: ParsedQuery,
        variables: Mapping[str, Any],
    ) -> SourceResult:
        if not field.selection:
            return SourceResult(errors=[{
                "message": f'Field "{field.name}" of type "{self.type_name}" must have a selection of subfields.',
            }])

        document, used = self.build_document(field, query)
        payload = {
            "query": document,
            "variables": {name: variables[name] for name in used if name in variables},
        }
        logger.debug("Querying %s for %s: %s", self.url, self.type_name, payload)

        try:
            async with self.session.post(self.url, json=payload) as response:
                status = response.status
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceError(f"Failed to query {self.url}: {e}") from e

        if not isinstance(body, dict):
            raise SourceError(f"Failed to query {self.url}: {status} returned no GraphQL response")

        data = body.get("data")
        errors = [
            error if isinstance(error, dict) else {"message": str(error)}
            for error in body.get("errors") or []
        ]
        if status != 200 and not errors:
            errors.append({"message": f"{self.url} returned HTTP {status}"})

        if isinstance(data, dict) and "__typename" in data:
            # The remote root type is exposed under our own type name
            data["__typename"] = self.type_name

        return SourceResult(data=data, errors=errors)

