"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdpost.cli.commands import check_cmd, commit_cmd, export_cmd, history_cmd, init_cmd, show_cmd


app = typer.Typer(name="mdpost", no_args_is_help=True, help="Front-matter content record checker and catalog")

app.command(name="check")(check_cmd)
app.command(name="show")(show_cmd)
app.command(name="init")(init_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="export")(export_cmd)
app.command(name="history")(history_cmd)
