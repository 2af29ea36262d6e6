"""
Shared fixtures for film_pages tests.

Remote APIs are replaced by an in-process aiohttp server that speaks just
enough of the GraphQL film API and the Pixabay search API.
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from film_pages.config import SiteConfig


FILMS = [
    {"id": "film-5", "title": "The Empire Strikes Back", "director": "Irvin Kershner", "episodeId": 5},
    {"id": "film-4", "title": "A New Hope", "director": "George Lucas", "episodeId": 4},
    {"id": "film-6", "title": "Return of the Jedi", "director": "Richard Marquand", "episodeId": 6},
]

PHOTOS = [
    {
        "id": 1,
        "pageURL": "https://pixabay.com/photos/puppy-1/",
        "previewURL": "https://cdn.pixabay.com/photo/puppy-1_150.jpg",
        "webformatURL": "https://pixabay.com/get/puppy-1_640.jpg",
        "largeImageURL": "https://pixabay.com/get/puppy-1_1280.jpg",
        "tags": "dog, puppy",
        "user": "someone",
        "likes": 12,
    },
    {
        "id": 2,
        "previewURL": "https://cdn.pixabay.com/photo/puppy-2_150.jpg",
        "tags": "puppy",
    },
]

API_KEY = "test-key"


class FakeUpstream:
    """Stand-in for both remote APIs, recording every request it receives."""

    def __init__(self):
        self.films = [dict(film) for film in FILMS]
        self.graphql_requests = []
        self.photos = [dict(photo) for photo in PHOTOS]
        self.pixabay_requests = []
        self.graphql_errors = None

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/graphql", self.graphql)
        app.router.add_get("/pixabay/", self.pixabay)
        return app

    async def graphql(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.graphql_requests.append(body)
        if self.graphql_errors:
            return web.json_response({"data": None, "errors": self.graphql_errors})

        query = body["query"]
        if "allFilms" in query:
            films = self.films
            if "episodeId_ASC" in query:
                films = sorted(films, key=lambda film: film["episodeId"])
            return web.json_response({
                "data": {"allFilms": [{"id": film["id"], "title": film["title"]} for film in films]}
            })
        if "Film(" in query:
            title = body.get("variables", {}).get("title")
            film = next((film for film in self.films if film["title"] == title), None)
            data = {"title": film["title"], "director": film["director"]} if film else None
            return web.json_response({"data": {"Film": data}})
        return web.json_response({"errors": [{"message": "Unsupported query"}]}, status=400)

    async def pixabay(self, request: web.Request) -> web.Response:
        self.pixabay_requests.append(dict(request.query))
        if request.query.get("key") != API_KEY:
            return web.json_response({"error": "[ERROR 400] Invalid or missing API key"}, status=400)
        return web.json_response({"total": len(self.photos), "totalHits": len(self.photos), "hits": self.photos})


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def run_upstream(upstream, tmp_path):
    """
    Run an async scenario against the fake upstream.

    The scenario receives the running TestServer and a SiteConfig pointing
    both sources at it, with output under tmp_path.
    """
    def run(scenario, **overrides):
        async def main():
            async with TestServer(upstream.make_app()) as server:
                options = {
                    "pixabay_api_key": API_KEY,
                    "pixabay_url": str(server.make_url("/pixabay/")),
                    "swapi_url": str(server.make_url("/graphql")),
                    "output_dir": tmp_path / "public",
                    "request_timeout": 5.0,
                }
                options.update(overrides)
                config = SiteConfig(_env_file=None, **options)
                return await scenario(server, config)

        return asyncio.run(main())

    return run
