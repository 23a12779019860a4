"""Typer based command line entry points for draftimages."""

from __future__ import annotations

import typer

from draftimages.core.logger import get_logger, set_level
from draftimages.core.pipeline import Pipeline
from draftimages.core.settings import RevisionRange

app = typer.Typer(
    help="Add DraftImage elements from changed JSX files to the editorial spreadsheet.",
    invoke_without_command=True,
)


def _handle_error(exc: Exception) -> None:
    logger = get_logger()
    logger.error("draftimages run failed: %s", exc, exc_info=True)
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _build_pipeline() -> Pipeline:
    return Pipeline()


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure logging, then sync when no command is given (the CI entry point)."""

    try:
        set_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    if ctx.invoked_subcommand is None:
        cmd_sync()


@app.command("sync")
def cmd_sync() -> None:
    """Append new DraftImages from the pushed revisions to the spreadsheet."""

    try:
        revisions = RevisionRange.from_env()
        result = _build_pipeline().run(revisions)
    except Exception as exc:
        if isinstance(exc, typer.Exit):
            raise
        _handle_error(exc)
    else:
        if result.nothing_to_do:
            typer.echo("No changed .jsx files; nothing to do.")
            return
        if result.reconcile and result.reconcile.unactioned:
            typer.secho(
                "Warning: in the spreadsheet but no longer referenced and not added to a worksheet: "
                + ", ".join(result.reconcile.unactioned),
                fg=typer.colors.YELLOW,
                err=True,
            )
        typer.secho(
            f"Success! Added {result.appended_count} new row(s) to the spreadsheet.",
            fg=typer.colors.GREEN,
        )


@app.command("scan")
def cmd_scan() -> None:
    """List DraftImages found in the changed files without contacting the spreadsheet."""

    try:
        revisions = RevisionRange.from_env()
        changed, candidates = _build_pipeline().scan(revisions)
    except Exception as exc:
        if isinstance(exc, typer.Exit):
            raise
        _handle_error(exc)
    else:
        if not changed:
            typer.echo("<no changed .jsx files>")
            return
        if not candidates:
            typer.echo("<no DraftImages>")
            return
        for record in candidates:
            typer.echo(f"{record.document_name:30} {record.id or '<no id>':38} {record.original_url or ''}")


@app.command("check-schema")
def cmd_check_schema() -> None:
    """Validate the spreadsheet header row against the configured columns."""

    try:
        header = _build_pipeline().check_schema()
    except Exception as exc:
        if isinstance(exc, typer.Exit):
            raise
        _handle_error(exc)
    else:
        typer.echo(f"Header OK ({len(header)} columns)")


def main() -> None:
    app(prog_name="draftimages")


if __name__ == "__main__":
    main()
