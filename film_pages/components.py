"""Template components and the data each one requires.

A component pairs a Jinja2 template with the query that supplies its
``data`` and the context parameters the page registry must pass in. The
renderer checks every page context against ``context_params`` before
running the query, so a template never renders with a partial shape.
"""

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .constants.paths import FILM_TEMPLATE, INDEX_TEMPLATE
from .errors import TemplateContractError


class Component(BaseModel):
    """A renderable template and its declared data contract."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Component name")
    template: str = Field(..., description="Jinja2 template file name")
    query: str = Field(..., description="Query whose result is passed to the template as `data`")
    context_params: List[str] = Field(
        default_factory=list,
        description="Context keys the page must supply, used as query variables"
    )

    def check_context(self, context: Mapping[str, Any]) -> None:
        """Raise TemplateContractError unless context has exactly the declared keys."""
        expected = set(self.context_params)
        given = set(context)
        missing = sorted(expected - given)
        unexpected = sorted(given - expected)
        if missing or unexpected:
            raise TemplateContractError(
                f"Context for component '{self.name}' does not match its contract "
                f"(missing: {missing or 'none'}, unexpected: {unexpected or 'none'})"
            )


INDEX_COMPONENT = Component(
    name="index",
    template=INDEX_TEMPLATE,
    query="""
      {
        pixabayPhoto {
          previewURL
        }
        swapi {
          allFilms(orderBy: episodeId_ASC) {
            id
            title
          }
        }
      }
    """,
)

FILM_COMPONENT = Component(
    name="film",
    template=FILM_TEMPLATE,
    query="""
      query($title: String!) {
        swapi {
          Film(title: $title) {
            title
            director
          }
        }
      }
    """,
    context_params=["title"],
)

COMPONENTS: Dict[str, Component] = {
    component.name: component for component in (INDEX_COMPONENT, FILM_COMPONENT)
}
