from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from ledgerquote.adapters.quote_files import QuoteFileFeed
from ledgerquote.domain.errors import StorageFailure
from ledgerquote.domain.model import Instrument, InstrumentKind
from ledgerquote.domain.schema import SchemaCatalog
from ledgerquote.ui import cli


def test_update_command_exits_with_the_run_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_update(feed: object, **kwargs: object) -> SimpleNamespace:
        captured["feed"] = feed
        captured.update(kwargs)
        return SimpleNamespace(exit_code=1)

    monkeypatch.setattr(cli, "update_quotes", fake_update)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "--database-uri",
                "sqlite+pysqlite:///ledger.db",
                "update",
                "quotes.csv",
                "--stale-days",
                "3",
            ]
        )

    assert excinfo.value.code == 1
    feed = captured["feed"]
    assert isinstance(feed, QuoteFileFeed)
    assert feed.path == Path("quotes.csv")
    assert captured["database_uri"] == "sqlite+pysqlite:///ledger.db"
    catalog = captured["catalog"]
    assert isinstance(catalog, SchemaCatalog)
    assert all(catalog.schema_for(kind).stale_days == 3 for kind in catalog.kinds())


def test_symbols_command_prints_one_symbol_per_line(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_list_symbols(**_: object) -> list[Instrument]:
        return [
            Instrument("FOO", InstrumentKind.SECURITY, "US"),
            Instrument("USDGBP=X", InstrumentKind.CURRENCY),
        ]

    monkeypatch.setattr(cli, "list_symbols", fake_list_symbols)

    cli.main(["symbols"])

    assert capsys.readouterr().out.splitlines() == ["FOO,US", "USDGBP=X"]


def test_storage_failure_exits_with_run_failure_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_update(*_: object, **__: object) -> SimpleNamespace:
        raise StorageFailure("ledger locked")

    monkeypatch.setattr(cli, "update_quotes", fake_update)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["update", "quotes.csv"])

    assert excinfo.value.code == cli.RUN_FAILURE_EXIT_CODE


def test_negative_stale_days_is_a_configuration_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["update", "quotes.csv", "--stale-days", "-1"])

    assert excinfo.value.code == cli.RUN_FAILURE_EXIT_CODE


def test_missing_quote_file_is_a_run_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fake_update(feed: QuoteFileFeed, **_: object) -> SimpleNamespace:
        rows = list(feed)
        return SimpleNamespace(exit_code=len(rows))

    monkeypatch.setattr(cli, "update_quotes", fake_update)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["update", str(tmp_path / "missing.csv")])

    assert excinfo.value.code == cli.RUN_FAILURE_EXIT_CODE


def test_undecodable_quote_file_is_a_run_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "quotes.csv"
    path.write_bytes(b"xSymbol,xType\n\xff,stock\n")

    def fake_update(feed: QuoteFileFeed, **_: object) -> SimpleNamespace:
        return SimpleNamespace(exit_code=len(list(feed)))

    monkeypatch.setattr(cli, "update_quotes", fake_update)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["update", str(path)])

    assert excinfo.value.code == cli.RUN_FAILURE_EXIT_CODE
