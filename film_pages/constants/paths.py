"""File and directory path constants."""

from pathlib import Path

# Package directories
PACKAGE_DIR = Path(__file__).parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# Output directory names
DEFAULT_OUTPUT_DIR = Path("public")
PAGE_DATA_DIR_NAME = "page-data"

# File names (relative to page directories)
PAGE_HTML_FILENAME = "index.html"
PAGE_DATA_FILENAME = "page-data.json"

# Template files
INDEX_TEMPLATE = "index.html"
FILM_TEMPLATE = "film.html"
