"""Rendering registered pages to HTML and running a full site build."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiohttp
from jinja2 import Environment, PackageLoader, select_autoescape
from pydantic import BaseModel, Field

from .config import SiteConfig
from .constants.config import SWAPI_FIELD_NAME
from .constants.paths import (
    PAGE_DATA_DIR_NAME,
    PAGE_DATA_FILENAME,
    PAGE_HTML_FILENAME,
)
from .errors import PagePathError
from .graphql import mount_field
from .models.page import PageDescriptor
from .pages import PageRegistry, create_pages, register_static_pages
from .query import DataLayer
from .utils.normalization import normalize_page_path, slugify


logger = logging.getLogger(__name__)


class BuildReport(BaseModel):
    """Summary of a finished build."""

    output_dir: Path = Field(description="Directory the site was written to")
    pages_written: List[str] = Field(default_factory=list, description="Paths of the rendered pages")


def create_environment() -> Environment:
    """Jinja2 environment loading the package templates."""
    env = Environment(
        loader=PackageLoader("film_pages", "templates"),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["slugify"] = slugify
    return env


def page_output_paths(output_dir: Path, path: str) -> tuple[Path, Path]:
    """
    Return (html_path, page_data_path) for a page path under output_dir.

    Raises:
        PagePathError: if either file would land outside output_dir
    """
    root = Path(output_dir).resolve()
    relative = normalize_page_path(path)
    page_dir = (root / relative).resolve() if relative else root
    data_dir = (root / PAGE_DATA_DIR_NAME / (relative or "index")).resolve()
    for target in (page_dir, data_dir):
        if not target.is_relative_to(root):
            raise PagePathError(f"Page path {path!r} resolves outside {output_dir}")
    return page_dir / PAGE_HTML_FILENAME, data_dir / PAGE_DATA_FILENAME


class SiteRenderer:
    """Render page descriptors with their component's query data."""

    def __init__(
        self,
        data_layer: DataLayer,
        output_dir: Path,
        env: Optional[Environment] = None,
        field_name: str = SWAPI_FIELD_NAME,
    ):
        self.data_layer = data_layer
        self.output_dir = Path(output_dir)
        self.field_name = field_name
        self.env = env or create_environment()

    async def render_page(self, page: PageDescriptor) -> Path:
        """
        Render one page and write its HTML and page data.

        Raises:
            TemplateContractError: if the context does not match the component
            QueryFailure: if the component query returned errors
            PagePathError: if the page path escapes the output directory
        """
        component = page.component
        component.check_context(page.context)

        html_path, data_path = page_output_paths(self.output_dir, page.path)
        query = mount_field(component.query, SWAPI_FIELD_NAME, self.field_name)
        result = (await self.data_layer.query(query, variables=page.context)).raise_for_errors()
        html = self.env.get_template(component.template).render(data=result.data)

        html_path.parent.mkdir(parents=True, exist_ok=True)
        data_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(html_path, "w", encoding="utf-8") as f:
            await f.write(html)

        page_data = {
            "componentChunkName": component.name,
            "path": page.path,
            "result": {"data": result.data, "pageContext": page.context},
        }
        async with aiofiles.open(data_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(page_data, indent=2, ensure_ascii=False))

        logger.debug("Wrote %s", html_path)
        return html_path

    async def render_all(self, pages: List[PageDescriptor]) -> List[str]:
        """Render pages one after another in registration order."""
        written = []
        for page in pages:
            await self.render_page(page)
            written.append(page.path)
        return written


async def collect_pages(data_layer: DataLayer, field_name: str = SWAPI_FIELD_NAME) -> PageRegistry:
    """Register static pages, then the pages generated from query results."""
    registry = PageRegistry()
    register_static_pages(registry)
    await create_pages(data_layer, registry, field_name=field_name)
    return registry


async def build_site(config: SiteConfig) -> BuildReport:
    """
    Run a complete build: source data, create pages and render them.

    The page creation query must finish before any page is rendered.

    Raises:
        QueryFailure: if any query returned errors
        TemplateContractError: if a page context does not match its component
        PagePathError: if a generated page path is unusable
    """
    timeout = aiohttp.ClientTimeout(total=config.request_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        data_layer = DataLayer.from_config(config, session)
        registry = await collect_pages(data_layer, config.swapi_field_name)
        logger.info("Rendering %d pages to %s", len(registry), config.output_dir)

        renderer = SiteRenderer(data_layer, config.output_dir, field_name=config.swapi_field_name)
        written = await renderer.render_all(registry.pages)

    return BuildReport(output_dir=config.output_dir, pages_written=written)


async def list_pages(config: SiteConfig) -> List[PageDescriptor]:
    """Create pages without rendering them."""
    timeout = aiohttp.ClientTimeout(total=config.request_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        data_layer = DataLayer.from_config(config, session)
        registry = await collect_pages(data_layer, config.swapi_field_name)
    return registry.pages
