"""Photo source backed by the Pixabay image search API."""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import aiohttp
from pydantic import ValidationError

from ..constants.config import PIXABAY_ALL_PHOTOS_FIELD, PIXABAY_API_URL, PIXABAY_PHOTO_FIELD
from ..errors import SourceError
from ..graphql import ParsedQuery, QueryField, parse_selection
from ..models.photo import PixabayPhotoModel
from .base import DataSource, SourceResult


logger = logging.getLogger(__name__)

PHOTO_TYPE_NAME = "PixabayPhoto"


class PixabaySource(DataSource):
    """
    Search Pixabay once per build and expose the hits as query fields.

    ``pixabayPhoto`` resolves to the first hit and ``allPixabayPhoto`` to
    every hit, each projected onto the fields the query selects.
    """

    field_names = (PIXABAY_PHOTO_FIELD, PIXABAY_ALL_PHOTOS_FIELD)

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str],
        search_term: str,
        api_url: str = PIXABAY_API_URL,
    ):
        self.session = session
        self.api_key = api_key
        self.search_term = search_term
        self.api_url = api_url
        self._photos: Optional[List[PixabayPhotoModel]] = None
        self._lock = asyncio.Lock()

    async def fetch_photos(self) -> List[PixabayPhotoModel]:
        """Fetch search hits from Pixabay. Results are sourced once and reused."""
        async with self._lock:
            if self._photos is not None:
                return self._photos

            if not self.api_key:
                raise SourceError("PIXABAY_API_KEY is not configured")

            params = {"key": self.api_key, "q": self.search_term}
            logger.info("Sourcing Pixabay photos for '%s'", self.search_term)
            try:
                async with self.session.get(self.api_url, params=params) as response:
                    if response.status != 200:
                        raise SourceError(f"Failed to fetch {self.api_url}: {response.status}")
                    payload = await response.json(content_type=None)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                raise SourceError(f"Failed to fetch {self.api_url}: {e}") from e

            hits = payload.get("hits", []) if isinstance(payload, dict) else []
            try:
                self._photos = [PixabayPhotoModel.model_validate(hit) for hit in hits]
            except ValidationError as e:
                raise SourceError(f"Unexpected photo record from {self.api_url}: {e}") from e
            logger.info("Sourced %d Pixabay photos", len(self._photos))
            return self._photos

    @staticmethod
    def _project(photo: PixabayPhotoModel, keys: List[QueryField]) -> Dict[str, Any]:
        values = photo.model_dump()
        projected: Dict[str, Any] = {}
        for key in keys:
            if key.name == "__typename":
                projected[key.response_key] = PHOTO_TYPE_NAME
            else:
                projected[key.response_key] = values[key.name]
        return projected

    async def resolve(
        self,
        field: QueryField,
        query: ParsedQuery,
        variables: Mapping[str, Any],
    ) -> SourceResult:
        keys = parse_selection(field.selection)
        if not keys:
            return SourceResult(errors=[{
                "message": f'Field "{field.name}" of type "{PHOTO_TYPE_NAME}" must have a selection of subfields.',
            }])

        known = set(PixabayPhotoModel.model_fields) | {"__typename"}
        unknown = [key.name for key in keys if key.name not in known]
        if unknown:
            return SourceResult(errors=[
                {"message": f'Cannot query field "{name}" on type "{PHOTO_TYPE_NAME}".'}
                for name in unknown
            ])

        photos = await self.fetch_photos()
        if field.name == PIXABAY_PHOTO_FIELD:
            data = self._project(photos[0], keys) if photos else None
        else:
            data = [self._project(photo, keys) for photo in photos]
        return SourceResult(data=data)
