"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mipsync.cli.commands import init_cmd, parse_cmd, status_cmd, sync_cmd


app = typer.Typer(name="mipsync", no_args_is_help=True, help="Proposal repository and pull request synchronizer")

app.command(name="init")(init_cmd)
app.command(name="sync")(sync_cmd)
app.command(name="parse")(parse_cmd)
app.command(name="status")(status_cmd)
