"""Photo model for hits returned by the Pixabay API."""

from pydantic import BaseModel, ConfigDict, Field


class PixabayPhotoModel(BaseModel):
    """Pydantic model for a single Pixabay image hit."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Pixabay image ID")
    pageURL: str = Field(default="", description="Pixabay page for the image")
    previewURL: str = Field(default="", description="Low resolution preview, max 150px")
    webformatURL: str = Field(default="", description="Medium sized image, max 640px")
    largeImageURL: str = Field(default="", description="Scaled image, max 1280px")
    tags: str = Field(default="", description="Comma separated tags")
    user: str = Field(default="", description="Uploader name")
