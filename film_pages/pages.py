"""Page registry and the film page generation step."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .constants.config import SWAPI_FIELD_NAME
from .components import FILM_COMPONENT, INDEX_COMPONENT, Component
from .errors import PagePathError, SourceError
from .graphql import mount_field
from .models.film import FilmModel
from .models.page import PageDescriptor
from .query import DataLayer
from .utils.normalization import normalize_page_path, slugify


logger = logging.getLogger(__name__)

ALL_FILMS_QUERY = """
  {
    swapi {
      allFilms {
        title
      }
    }
  }
"""


class PageRegistry:
    """Collects page descriptors in registration order."""

    def __init__(self):
        self._pages: List[PageDescriptor] = []

    def create_page(
        self,
        path: str,
        component: Component,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        page = PageDescriptor(path=path, component=component, context=dict(context or {}))
        if any(existing.path == path for existing in self._pages):
            # Later pages overwrite earlier ones on disk
            logger.debug("Page path '%s' registered more than once", path)
        self._pages.append(page)

    @property
    def pages(self) -> List[PageDescriptor]:
        return list(self._pages)

    def __len__(self) -> int:
        return len(self._pages)


def register_static_pages(registry: PageRegistry) -> None:
    """Register pages that do not depend on query results."""
    registry.create_page("/", INDEX_COMPONENT)


def emit_film_pages(films: Iterable[FilmModel], registry: PageRegistry) -> int:
    """
    Register one film page per record.

    Args:
        films: Film records in the order pages should be registered
        registry: Registry receiving the page descriptors

    Returns:
        Number of pages registered

    Raises:
        PagePathError: if a title slugifies to the site root
    """
    count = 0
    for film in films:
        path = slugify(film.title)
        if not normalize_page_path(path):
            raise PagePathError(f"Film title {film.title!r} does not produce a page path")
        registry.create_page(
            path=path,
            component=FILM_COMPONENT,
            context={"title": film.title},
        )
        count += 1
    return count


async def create_pages(
    data_layer: DataLayer,
    registry: PageRegistry,
    field_name: str = SWAPI_FIELD_NAME,
) -> int:
    """
    Query every film title and register a page for each.

    Args:
        data_layer: Data layer answering the film query
        registry: Registry receiving the page descriptors
        field_name: Top-level field the film source is mounted under

    Raises:
        QueryFailure: if the query returned errors; no pages are registered
        SourceError: if a film record is malformed
    """
    query = mount_field(ALL_FILMS_QUERY, SWAPI_FIELD_NAME, field_name)
    result = (await data_layer.query(query)).raise_for_errors()

    namespace: Dict[str, Any] = (result.data or {}).get(SWAPI_FIELD_NAME) or {}
    try:
        films = [FilmModel.model_validate(film) for film in namespace.get("allFilms") or []]
    except ValidationError as e:
        raise SourceError(f"Unexpected film record: {e}") from e
    count = emit_film_pages(films, registry)
    logger.info("Created %d film pages", count)
    return count
