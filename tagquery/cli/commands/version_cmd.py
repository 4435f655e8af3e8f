from __future__ import annotations

import platform

import tagquery

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="version", cls=RichCommand)
@output_options
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show tagquery and Python versions."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        return CommandOutput(
            data={
                "version": tagquery.__version__,
                "pythonVersion": platform.python_version(),
            },
        )

    run_command(ctx, command="version", fn=fn)
