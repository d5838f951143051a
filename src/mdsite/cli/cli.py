"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, check_cmd, entries_cmd, tags_cmd
from mdsite.logging_setup import configure_logging


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Markdown + git history -> static site content")


@app.callback()
def main() -> None:
    """Markdown + git history -> static site content."""
    configure_logging()


app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)
app.command(name="entries")(entries_cmd)
app.command(name="tags")(tags_cmd)
