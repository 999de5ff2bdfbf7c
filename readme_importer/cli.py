"""Typer-based command for importing a GitHub README into a Markdown note."""

from pathlib import Path
from typing import Annotated

import typer

from readme_importer import __version__
from readme_importer.config.logger_config import logger
from readme_importer.config.settings import load_settings
from readme_importer.importing.domain.models import ImportRequest
from readme_importer.importing.importer import run_import

PROMPT_HEADING = "Enter GitHub Repository URL"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"readme-importer {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="readme-importer",
    help="Import GitHub README files into a Markdown vault",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Import GitHub README files into a Markdown vault."""


def prompt_request() -> ImportRequest | None:
    """Ask for the repository URL and a confirmation.

    Returns the request to run, or None when the user declines.
    """
    typer.secho(PROMPT_HEADING, bold=True)
    repository_url = typer.prompt("Repository URL").strip()
    if not typer.confirm("Import", default=True):
        return None
    return ImportRequest(repository_url=repository_url)


@app.command("import-readme")
def import_readme(
    vault: Annotated[
        Path | None,
        typer.Option("--vault", help="Vault directory (default: README_IMPORTER_VAULT_DIR or '.')"),
    ] = None,
    note: Annotated[
        Path | None,
        typer.Option("--note", help="Target note, relative to the vault (default: README_IMPORTER_NOTE_PATH)"),
    ] = None,
) -> None:
    """Fetch a repository README and insert it into the target note."""
    try:
        settings = load_settings()
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    request = prompt_request()
    if request is None:
        logger.info("Import cancelled at the prompt")
        typer.echo("Import cancelled.")
        raise typer.Exit

    result = run_import(request, settings=settings, vault_dir=vault, note_path=note)
    if not result.ok:
        raise typer.Exit(code=1)
