"""Simple Flask server for previewing a built site."""

import logging
from pathlib import Path

from flask import Flask, Response, send_from_directory

from .constants.config import DEFAULT_HOST, DEFAULT_PORT
from .constants.paths import DEFAULT_OUTPUT_DIR, PAGE_HTML_FILENAME
from .utils.normalization import normalize_page_path


logger = logging.getLogger(__name__)


def create_app(output_dir: Path = DEFAULT_OUTPUT_DIR) -> Flask:
    """Create a Flask app that serves the files under output_dir."""
    site_dir = Path(output_dir).resolve()
    app = Flask(__name__, static_folder=None)

    @app.route("/")
    def index_page() -> Response:
        """Serve the site index."""
        return send_from_directory(site_dir, PAGE_HTML_FILENAME)

    @app.route("/<path:page>")
    def site_file(page: str) -> Response:
        """Serve a page directory's index.html, or a plain file such as page data."""
        relative = normalize_page_path(page)
        if (site_dir / relative / PAGE_HTML_FILENAME).is_file():
            return send_from_directory(site_dir, f"{relative}/{PAGE_HTML_FILENAME}")
        return send_from_directory(site_dir, relative)

    return app


def run_server(
    output_dir: Path = DEFAULT_OUTPUT_DIR,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Serving %s at http://localhost:%d/", output_dir, port)
    create_app(output_dir).run(host=host, port=port, debug=debug)
