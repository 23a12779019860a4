"""CLI integration tests for the push-triggered sync."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from draftimages import cli
from draftimages.config import SheetConfig
from draftimages.core.pipeline import Pipeline
from draftimages.services.changeset import resolver

LESSON = """
export default () => (
  <div>
    <DraftImage id="old-1" originalUrl="https://example.com/old.png" comment="already there" />
    <DraftImage id="new-1" originalUrl="https://example.com/new.png" comment="please redraw" />
  </div>
);
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def revisions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEFORE_SHA", "aaa111")
    monkeypatch.setenv("CURRENT_SHA", "bbb222")


def _fake_git(monkeypatch: pytest.MonkeyPatch, stdout: str, returncode: int = 0, stderr: str = "") -> None:
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(resolver.subprocess, "run", fake_run)


def _use_pipeline(monkeypatch: pytest.MonkeyPatch, pipeline: Pipeline) -> None:
    monkeypatch.setattr(cli, "_build_pipeline", lambda: pipeline)


def _no_network(config: SheetConfig):
    raise AssertionError("the spreadsheet must not be contacted")


def test_only_txt_changes_exit_early_without_network(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
) -> None:
    _fake_git(monkeypatch, "notes/todo.txt\nREADME.txt\n")
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=_no_network, repo_root=tmp_path))

    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 0, result.output
    assert "nothing to do" in result.output


def test_sync_appends_new_rows_and_reports(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
    fake_store,
) -> None:
    (tmp_path / "lessons").mkdir()
    (tmp_path / "lessons" / "intro.jsx").write_text(LESSON, encoding="utf-8")
    _fake_git(monkeypatch, "lessons/intro.jsx\nREADME.md\n")
    store = fake_store(
        rows=[
            ["old-1", "https://example.com/old.png", "", "intro.jsx", "", "", "", "", ""],
            ["gone-1", "https://example.com/gone.png", "", "other.jsx", "", "", "", "", ""],
            ["done-1", "https://example.com/done.png", "", "other.jsx", "", "", "", "", "TRUE"],
        ]
    )
    _use_pipeline(
        monkeypatch,
        Pipeline(sheet_config=sheet_config, store_factory=lambda config: store, repo_root=tmp_path),
    )

    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 0, result.output
    assert store.calls == ["read_header", "read_data_rows", "append_rows"]
    assert store.appended == [
        [["new-1", "https://example.com/new.png", "please redraw", "intro.jsx", "", "", "", "", ""]]
    ]
    assert store.closed
    assert "Added 1 new row(s)" in result.output
    assert "gone-1" in result.output
    assert "done-1" not in result.output


def test_sync_subcommand_behaves_like_default(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
) -> None:
    _fake_git(monkeypatch, "")
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=_no_network, repo_root=tmp_path))

    result = cli_runner.invoke(cli.app, ["sync"])

    assert result.exit_code == 0, result.output


def test_schema_mismatch_fails_before_any_write(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
    fake_store,
    header: list[str],
) -> None:
    (tmp_path / "intro.jsx").write_text(LESSON, encoding="utf-8")
    _fake_git(monkeypatch, "intro.jsx\n")
    header[2] = "Notes"
    store = fake_store(header=header)
    _use_pipeline(
        monkeypatch,
        Pipeline(sheet_config=sheet_config, store_factory=lambda config: store, repo_root=tmp_path),
    )

    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "'Comment'" in result.output
    assert store.calls == ["read_header"]
    assert store.closed


def test_git_failure_exits_non_zero(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
) -> None:
    _fake_git(monkeypatch, "", returncode=128, stderr="fatal: bad object aaa111")
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=_no_network, repo_root=tmp_path))

    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "bad object aaa111" in result.output


def test_missing_revisions_exit_non_zero(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "CURRENT_SHA" in result.output or "BEFORE_SHA" in result.output


def test_unparsable_file_aborts_without_network(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
) -> None:
    (tmp_path / "broken.jsx").write_text("export default <div>", encoding="utf-8")
    _fake_git(monkeypatch, "broken.jsx\n")
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=_no_network, repo_root=tmp_path))

    result = cli_runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "broken.jsx" in result.output


def test_scan_lists_candidates_without_network(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    revisions: None,
    sheet_config: SheetConfig,
) -> None:
    (tmp_path / "intro.jsx").write_text(LESSON, encoding="utf-8")
    _fake_git(monkeypatch, "intro.jsx\n")
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=_no_network, repo_root=tmp_path))

    result = cli_runner.invoke(cli.app, ["scan"])

    assert result.exit_code == 0, result.output
    assert "old-1" in result.output
    assert "new-1" in result.output


def test_check_schema_command(
    cli_runner: CliRunner,
    monkeypatch: pytest.MonkeyPatch,
    sheet_config: SheetConfig,
    fake_store,
) -> None:
    store = fake_store()
    _use_pipeline(monkeypatch, Pipeline(sheet_config=sheet_config, store_factory=lambda config: store))

    result = cli_runner.invoke(cli.app, ["check-schema"])

    assert result.exit_code == 0, result.output
    assert "Header OK (9 columns)" in result.output
    assert store.closed
