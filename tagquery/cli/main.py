from __future__ import annotations

from pathlib import Path

import tagquery

from .click_compat import RichGroup, click
from .context import BASE_URL_ENV, STORE_ENV, CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="tagquery",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--base-url",
    type=str,
    default=None,
    help=f"Origin used for share links (default: ${BASE_URL_ENV} or http://localhost:5173).",
)
@click.option(
    "--store",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Saved searches file (default: ${STORE_ENV} or ~/.config/tagquery/saved_searches.json).",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None)
@click.version_option(version=tagquery.__version__, prog_name="tagquery")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    base_url: str | None,
    store: str | None,
    log_file: str | None,
) -> None:
    """Filter tagged items with boolean tag expressions."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    effective_log_file = Path(log_file) if log_file else None
    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        base_url=base_url,
        store_path=Path(store) if store else None,
        log_file=effective_log_file,
    )

    previous_logging = configure_logging(verbosity=verbose, log_file=effective_log_file)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.expr_cmds import eval_cmd as _eval_cmd  # noqa: E402
from .commands.expr_cmds import parse_cmd as _parse_cmd  # noqa: E402
from .commands.expr_cmds import tags_cmd as _tags_cmd  # noqa: E402
from .commands.expr_cmds import validate_cmd as _validate_cmd  # noqa: E402
from .commands.filter_cmd import filter_cmd as _filter_cmd  # noqa: E402
from .commands.link_cmds import link_group as _link_group  # noqa: E402
from .commands.saved_cmds import saved_group as _saved_group  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_parse_cmd)
cli.add_command(_validate_cmd)
cli.add_command(_tags_cmd)
cli.add_command(_eval_cmd)
cli.add_command(_filter_cmd)
cli.add_command(_link_group)
cli.add_command(_saved_group)
