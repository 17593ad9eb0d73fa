"""Typer CLI application."""

import typer
from rich.console import Console

from trinitty.errors import TrinittyError


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="trinitty",
        help="A minimal terminal UI. Press q to quit.",
        invoke_without_command=True,
        add_completion=False,
        rich_markup_mode="rich",
    )
    err_console = Console(stderr=True)

    @app.callback()
    def launch(ctx: typer.Context) -> None:
        """Launch the interactive terminal UI."""
        if ctx.invoked_subcommand is not None:
            return

        from trinitty.cli.studio.runtime import run_app
        try:
            run_app()
        except TrinittyError as e:
            # The terminal is already restored by the time we get here
            err_console.print(f"[bold red]trinitty:[/] {e}")
            raise typer.Exit(1)

    @app.command()
    def version() -> None:
        """Print the version and exit."""
        from trinitty import __version__
        typer.echo(__version__)

    return app
