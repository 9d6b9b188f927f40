"""Tests for the command line entry point with the database and bucket patched out."""

from unittest.mock import MagicMock

import pytest

from logarchive.schema import RunResult
from logarchive.storage import InMemoryArchiveStorage, InMemoryLogStore
from logarchive_api import cli


@pytest.fixture
def patched_stores(mocker, make_records):
    log_store = InMemoryLogStore(make_records(2))
    archive_storage = InMemoryArchiveStorage()
    mocker.patch("logarchive_api.database.sessionmanager", MagicMock())
    mocker.patch("logarchive_api.factory.SQLLogStore", return_value=log_store)
    mocker.patch("logarchive_api.factory.create_archive_storage", return_value=archive_storage)
    return log_store, archive_storage


@pytest.mark.asyncio
async def test_run_prints_and_saves_report(patched_stores, tmp_path, capsys):
    log_store, archive_storage = patched_stores
    output = tmp_path / "reports" / "run.json"

    await cli.run(output=output, batch_limit=10)

    assert '"status": "archived"' in capsys.readouterr().out
    report = RunResult.load_from_file(output)
    assert report.success
    assert report.results[0].file == "u1/logs_2024-01-01.txt"
    assert log_store.records == []
    assert "u1/logs_2024-01-01.txt" in archive_storage.files


@pytest.mark.asyncio
async def test_run_exits_on_failed_fetch(patched_stores):
    log_store, _ = patched_stores
    log_store.fail_fetch = True

    with pytest.raises(SystemExit) as exc_info:
        await cli.run()

    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_run_writes_log_file(patched_stores, tmp_path):
    await cli.run(log_dir=tmp_path / "logs")

    assert (tmp_path / "logs").is_dir()
