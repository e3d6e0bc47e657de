"""Main CLI application entry point."""

from __future__ import annotations

import typer

from sqltrim.cli.commands import extract, show_tables

app = typer.Typer(
    name="sqltrim",
    help="Trim an SQL dump down to a smaller file, based off table includes / excludes.",
    no_args_is_help=True,
)

# Register commands
app.command("extract")(extract.extract)
app.command("show-tables")(show_tables.show_tables)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
