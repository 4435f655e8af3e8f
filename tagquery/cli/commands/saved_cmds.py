from __future__ import annotations

from pydantic import ValidationError

from tagquery.saved_searches import SavedSearch

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import expression_argument, output_options
from ..runner import CommandOutput, run_command


def _search_row(search: SavedSearch) -> dict[str, object]:
    return search.model_dump(by_alias=True, mode="json", exclude={"tree"})


@click.group(name="saved", cls=RichGroup)
def saved_group() -> None:
    """Saved searches."""


@saved_group.command(name="list", cls=RichCommand)
@output_options
@click.pass_obj
def saved_list(ctx: CLIContext) -> None:
    """List saved searches."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        return CommandOutput(data=[_search_row(s) for s in ctx.get_store().list()])

    run_command(ctx, command="saved list", fn=fn)


@saved_group.command(name="show", cls=RichCommand)
@click.argument("search_id")
@output_options
@click.pass_obj
def saved_show(ctx: CLIContext, search_id: str) -> None:
    """Show one saved search, including its parsed tree."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        search = ctx.get_store().get(search_id)
        return CommandOutput(data={**_search_row(search), "tree": search.parsed().to_dict()})

    run_command(ctx, command="saved show", fn=fn)


@saved_group.command(name="add", cls=RichCommand)
@click.argument("name")
@expression_argument
@click.option("--query", "-q", "text_query", default=None, help="Free-text query to save.")
@output_options
@click.pass_obj
def saved_add(ctx: CLIContext, name: str, expression: str, *, text_query: str | None) -> None:
    """Save EXPR under NAME."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        try:
            search = SavedSearch.create(name, expression, query=text_query)
        except ValidationError as exc:
            first = exc.errors()[0]
            raise CLIError.usage(str(first["msg"])) from exc
        ctx.get_store().add(search)
        return CommandOutput(data=_search_row(search))

    run_command(ctx, command="saved add", fn=fn)


@saved_group.command(name="remove", cls=RichCommand)
@click.argument("search_id")
@output_options
@click.pass_obj
def saved_remove(ctx: CLIContext, search_id: str) -> None:
    """Delete a saved search."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        removed = ctx.get_store().remove(search_id)
        return CommandOutput(data={"removed": True, **_search_row(removed)})

    run_command(ctx, command="saved remove", fn=fn)
