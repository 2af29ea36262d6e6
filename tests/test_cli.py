"""Tests for cli.py: build, pages, clean and serve commands."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from film_pages import render, server
from film_pages.cli import cli
from film_pages.components import FILM_COMPONENT, INDEX_COMPONENT
from film_pages.errors import PagePathError, QueryFailure
from film_pages.models.page import PageDescriptor
from film_pages.render import BuildReport


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("OUTPUT_DIR", raising=False)
    return CliRunner()


class TestBuildCommand:
    def test_success(self, runner, monkeypatch, tmp_path):
        seen = {}

        async def fake_build_site(config):
            seen["output_dir"] = config.output_dir
            return BuildReport(output_dir=config.output_dir, pages_written=["/", "a-new-hope"])

        monkeypatch.setattr(render, "build_site", fake_build_site)
        result = runner.invoke(cli, ["build", "--output", str(tmp_path / "site")])

        assert result.exit_code == 0, result.output
        assert "Built 2 pages successfully" in result.output
        assert seen["output_dir"] == tmp_path / "site"

    def test_query_failure_exits_nonzero(self, runner, monkeypatch, tmp_path):
        async def failing_build_site(config):
            raise QueryFailure([{"message": "upstream down"}])

        monkeypatch.setattr(render, "build_site", failing_build_site)
        result = runner.invoke(cli, ["build", "--output", str(tmp_path)])

        assert result.exit_code == 1
        assert "upstream down" in result.output

    def test_unusable_page_path_exits_nonzero(self, runner, monkeypatch, tmp_path):
        async def failing_build_site(config):
            raise PagePathError("Page path '../escaped' resolves outside public")

        monkeypatch.setattr(render, "build_site", failing_build_site)
        result = runner.invoke(cli, ["build", "--output", str(tmp_path / "site")])

        assert result.exit_code == 1
        assert "resolves outside" in result.output

    def test_clean_flag_removes_previous_output(self, runner, monkeypatch, tmp_path):
        site = tmp_path / "site"
        (site / "stale").mkdir(parents=True)

        async def fake_build_site(config):
            assert not (config.output_dir / "stale").exists()
            return BuildReport(output_dir=config.output_dir)

        monkeypatch.setattr(render, "build_site", fake_build_site)
        result = runner.invoke(cli, ["build", "--output", str(site), "--clean"])
        assert result.exit_code == 0, result.output


class TestPagesCommand:
    def test_lists_pages(self, runner, monkeypatch):
        async def fake_list_pages(config):
            return [
                PageDescriptor(path="/", component=INDEX_COMPONENT),
                PageDescriptor(path="a-new-hope", component=FILM_COMPONENT, context={"title": "A New Hope"}),
            ]

        monkeypatch.setattr(render, "list_pages", fake_list_pages)
        result = runner.invoke(cli, ["pages"])

        assert result.exit_code == 0, result.output
        assert "a-new-hope\tfilm\ttitle='A New Hope'" in result.output
        assert "2 pages" in result.output


class TestCleanCommand:
    def test_removes_output(self, runner, tmp_path):
        site = tmp_path / "site"
        site.mkdir()
        result = runner.invoke(cli, ["clean", "--output", str(site)])
        assert result.exit_code == 0
        assert not site.exists()

    def test_nothing_to_remove(self, runner, tmp_path):
        result = runner.invoke(cli, ["clean", "--output", str(tmp_path / "missing")])
        assert result.exit_code == 0
        assert "Nothing to remove" in result.output


class TestServeCommand:
    def test_requires_built_site(self, runner, tmp_path):
        result = runner.invoke(cli, ["serve", "--output", str(tmp_path / "missing")])
        assert result.exit_code == 1

    def test_runs_server(self, runner, monkeypatch, tmp_path):
        calls = {}

        def fake_run_server(output_dir, host, port):
            calls.update(output_dir=output_dir, host=host, port=port)

        monkeypatch.setattr(server, "run_server", fake_run_server)
        result = runner.invoke(cli, ["serve", "--output", str(tmp_path), "--port", "8080"])

        assert result.exit_code == 0, result.output
        assert calls == {"output_dir": Path(tmp_path), "host": "0.0.0.0", "port": 8080}
