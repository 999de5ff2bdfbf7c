import typer

from readme_importer.importing.application.ports import NotifierPort


class ConsoleNotifier(NotifierPort):
    def success(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.GREEN)

    def failure(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.RED, err=True)
