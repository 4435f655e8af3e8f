from __future__ import annotations

from pathlib import Path

from tagquery import parse, to_string
from tagquery.items import filter_items, load_items

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import expression_argument, output_options
from ..runner import CommandOutput, run_command


@click.command(name="filter", cls=RichCommand)
@expression_argument
@click.option(
    "--items",
    "items_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="JSON file with an array of items ({id, title, tags, isArchived}).",
)
@click.option("--include-archived", is_flag=True, help="Also match archived items.")
@output_options
@click.pass_obj
def filter_cmd(
    ctx: CLIContext,
    expression: str,
    *,
    items_path: Path,
    include_archived: bool,
) -> None:
    """Show the items from --items whose tags match EXPR."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        expr = parse(expression)
        items = load_items(items_path)
        matched = filter_items(items, expr, include_archived=include_archived)
        return CommandOutput(
            data={
                "expression": to_string(expr),
                "total": len(items),
                "matched": len(matched),
                "items": [
                    item.model_dump(by_alias=True, mode="json", include={"id", "title", "tags"})
                    for item in matched
                ],
            },
        )

    run_command(ctx, command="filter", fn=fn)
