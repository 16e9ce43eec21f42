from __future__ import annotations

import sys
import types
from pathlib import Path

import pytest

from tableseed.config import Settings
from tableseed.domain.models import GenerationRequest
from tableseed.exceptions import SeedHookError, TableSeedError
from tableseed.generator import POSTRUN_FAILURE, PRERUN_FAILURE, SeedGenerator
from tableseed.runtime import Seeder, load_seeder, resolve_hook, run_seed_file

ROWS = [
    {"id": 1, "name": "O'Brien", "note": None},
    {"id": 2, "name": "Zoë \\ {x}", "note": "multi\nline"},
    {"id": 3, "name": "plain", "note": ""},
]


class ItemsSeeder(Seeder):
    table = "items"


@pytest.fixture
def hook_module(monkeypatch):
    """An importable module `seed_hooks` whose hooks record their calls."""
    module = types.ModuleType("seed_hooks")
    module.calls = []

    def approve(seeder):
        module.calls.append(("approve", seeder.table))
        return None

    def reject(seeder):
        module.calls.append(("reject", seeder.table))
        return False

    module.approve = approve
    module.reject = reject
    module.not_callable = 42
    monkeypatch.setitem(sys.modules, "seed_hooks", module)
    return module


def _generate(settings: Settings, fetcher_factory, **options) -> Path:
    fetcher = fetcher_factory({"items": ROWS})
    generator = SeedGenerator(settings, fetcher_factory=lambda database: fetcher)
    return generator.generate(GenerationRequest(table="items", chunk_size=2, **options)).path


def _inserted_rows(conn) -> list:
    return [params for _, batch in conn.executed_many for params in batch]


def test_insert_accepts_indexed_batches_in_key_order(fake_connection_factory):
    conn = fake_connection_factory()

    count = ItemsSeeder(conn).insert({1: {"id": 2}, 0: {"id": 1}})

    assert count == 2
    assert _inserted_rows(conn) == [(1,), (2,)]


def test_insert_accepts_unindexed_batches(fake_connection_factory):
    conn = fake_connection_factory()

    ItemsSeeder(conn).insert([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])

    assert _inserted_rows(conn) == [(1, "a"), (2, "b")]


def test_insert_of_empty_batch_is_a_no_op(fake_connection_factory):
    conn = fake_connection_factory()

    assert ItemsSeeder(conn).insert([]) == 0
    assert conn.executed_many == []


def test_generated_seed_reinserts_the_snapshot(
    test_settings: Settings, fake_fetcher_factory, fake_connection_factory
):
    path = _generate(test_settings, fake_fetcher_factory)
    conn = fake_connection_factory()

    run_seed_file(path, conn)

    assert len(conn.executed_many) == 2  # 3 rows in chunks of 2
    assert _inserted_rows(conn) == [tuple(row.values()) for row in ROWS]
    assert conn.commits == 1


def test_generated_unindexed_seed_reinserts_the_snapshot(
    test_settings: Settings, fake_fetcher_factory, fake_connection_factory
):
    path = _generate(test_settings, fake_fetcher_factory, indexed=False)
    conn = fake_connection_factory()

    run_seed_file(path, conn)

    assert _inserted_rows(conn) == [tuple(row.values()) for row in ROWS]


def test_load_seeder_finds_generated_class(test_settings: Settings, fake_fetcher_factory):
    path = _generate(test_settings, fake_fetcher_factory)

    seeder_cls = load_seeder(path)

    assert seeder_cls.__name__ == "ItemsTableSeeder"
    assert seeder_cls.table == "items"


def test_prerun_rejection_stops_before_inserts(
    test_settings: Settings, fake_fetcher_factory, fake_connection_factory, hook_module
):
    path = _generate(test_settings, fake_fetcher_factory, prerun_hook="seed_hooks:reject")
    conn = fake_connection_factory()

    with pytest.raises(SeedHookError) as excinfo:
        run_seed_file(path, conn)

    assert str(excinfo.value) == PRERUN_FAILURE
    assert conn.executed_many == []
    assert conn.rollbacks == 1
    assert hook_module.calls == [("reject", "items")]


def test_postrun_rejection_after_inserts(
    test_settings: Settings, fake_fetcher_factory, fake_connection_factory, hook_module
):
    path = _generate(test_settings, fake_fetcher_factory, postrun_hook="seed_hooks.reject")
    conn = fake_connection_factory()

    with pytest.raises(SeedHookError) as excinfo:
        run_seed_file(path, conn)

    assert str(excinfo.value) == POSTRUN_FAILURE
    assert len(conn.executed_many) == 2


def test_approving_hooks_let_the_seed_run(
    test_settings: Settings, fake_fetcher_factory, fake_connection_factory, hook_module
):
    path = _generate(
        test_settings,
        fake_fetcher_factory,
        prerun_hook="seed_hooks:approve",
        postrun_hook="seed_hooks:approve",
    )
    conn = fake_connection_factory()

    run_seed_file(path, conn)

    assert hook_module.calls == [("approve", "items"), ("approve", "items")]
    assert conn.commits == 1


class TestResolveHook:
    """Hook identifiers accept both `module:attr` and `module.attr`."""

    def test_colon_form(self, hook_module):
        assert resolve_hook("seed_hooks:approve") is hook_module.approve

    def test_dotted_form(self, hook_module):
        assert resolve_hook("seed_hooks.reject") is hook_module.reject

    @pytest.mark.parametrize(
        "identifier", ["nodots", "seed_hooks:missing", "no_such_module_xyz:f", "seed_hooks:not_callable"]
    )
    def test_invalid_identifiers(self, hook_module, identifier: str):
        with pytest.raises(SeedHookError):
            resolve_hook(identifier)


def test_load_seeder_without_seeder_class(tmp_path: Path):
    path = tmp_path / "NothingTableSeeder.py"
    path.write_text("VALUE = 1\n", encoding="utf-8")

    with pytest.raises(TableSeedError):
        load_seeder(path)
