from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tableseed import main as cli
from tableseed.config import Settings

runner = CliRunner()


@pytest.fixture
def cli_env(monkeypatch, test_settings: Settings, fake_fetcher_factory, fake_connection_factory):
    """Point the CLI at test settings and an in-memory database."""
    fetcher = fake_fetcher_factory({"products": [{"id": 1, "name": "mug"}, {"id": 2, "name": "cup"}]})
    opened = []

    @contextmanager
    def fake_scope(dsn: str, autocommit: bool = False):
        opened.append((dsn, autocommit))
        yield fake_connection_factory()

    monkeypatch.setattr(cli, "get_settings", lambda: test_settings)
    monkeypatch.setattr(cli, "connection_scope", fake_scope)
    monkeypatch.setattr(cli, "RowFetcher", lambda conn, schema: fetcher)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    return {"fetcher": fetcher, "opened": opened, "settings": test_settings}


def test_info_shows_configuration(cli_env):
    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "seeds_path=" in result.output


def test_seed_reports_each_table(cli_env):
    result = runner.invoke(cli.app, ["seed", "products,missing", "--orderby", "id"])

    assert result.exit_code == 1
    assert "Created a seed file from table products" in result.output
    assert "Could not create seed file from table missing" in result.output
    assert (Path(cli_env["settings"].seeds_path) / "ProductsTableSeeder.py").exists()


def test_seed_passes_options_to_fetcher(cli_env):
    result = runner.invoke(
        cli.app,
        [
            "seed",
            "products",
            "--exclude",
            "name",
            "--max",
            "1",
            "--orderby",
            "id",
            "--direction",
            "desc",
            "--classnameprefix",
            "Demo",
        ],
    )

    assert result.exit_code == 0, result.output
    call = cli_env["fetcher"].calls[-1]
    assert call["exclude"] == ("name",)
    assert call["limit"] == 1
    assert call["order_by"] == "id"
    assert call["direction"].value == "desc"
    assert (Path(cli_env["settings"].seeds_path) / "DemoProductsTableSeeder.py").exists()


def test_database_option_selects_connection(cli_env):
    result = runner.invoke(cli.app, ["seed", "products", "--database", "archive"])

    assert result.exit_code == 0, result.output
    dsn, autocommit = cli_env["opened"][0]
    assert dsn.split("?")[0].endswith("/archive")
    assert autocommit is True


def test_noindex_writes_list_batches(cli_env):
    result = runner.invoke(cli.app, ["seed", "products", "--noindex"])

    assert result.exit_code == 0, result.output
    content = (Path(cli_env["settings"].seeds_path) / "ProductsTableSeeder.py").read_text(encoding="utf-8")
    assert "self.insert([" in content
