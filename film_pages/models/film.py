"""Film model for records returned by the GraphQL film source."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FilmModel(BaseModel):
    """Pydantic model for a film record from the Star Wars API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Remote node ID")
    title: str = Field(..., description="Film title")
    director: str = Field(default="", description="Film director")
    episode_id: Optional[int] = Field(default=None, alias="episodeId", description="Episode number, used for ordering")
