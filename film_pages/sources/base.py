"""Base class for data sources mounted on the data layer."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from ..graphql import ParsedQuery, QueryField


class SourceResult(BaseModel):
    """Data and errors a source produced for one top-level field."""

    data: Optional[Any] = Field(default=None, description="Resolved value for the field")
    errors: List[Dict[str, Any]] = Field(default_factory=list, description="GraphQL-style error descriptors")


class DataSource(ABC):
    """A source plugin that answers one or more top-level query fields."""

    field_names: Tuple[str, ...] = ()

    @abstractmethod
    async def resolve(
        self,
        field: QueryField,
        query: ParsedQuery,
        variables: Mapping[str, Any],
    ) -> SourceResult:
        """Resolve a top-level field. Raises SourceError if the source is unreachable."""
        pass
