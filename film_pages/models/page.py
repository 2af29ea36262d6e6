"""Page descriptor model handed to the page registry."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from ..components import Component


class PageDescriptor(BaseModel):
    """One output page: where it goes, what renders it, and with which parameters."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="URL path of the page, e.g. 'a-new-hope'")
    component: Component = Field(..., description="Template component that renders the page")
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Parameters passed to the component query as variables"
    )
