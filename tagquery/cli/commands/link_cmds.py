from __future__ import annotations

from tagquery import parse, to_string, validate
from tagquery.links import (
    DeepLinkParams,
    build_share_url,
    expression_to_url_param,
    parse_share_url,
)

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import expression_argument, output_options
from ..runner import CommandOutput, run_command


@click.group(name="link", cls=RichGroup)
def link_group() -> None:
    """Shareable search links."""


@link_group.command(name="encode", cls=RichCommand)
@expression_argument
@click.option("--query", "-q", "text_query", default=None, help="Free-text query to include.")
@click.option("--collection", default=None, help="Saved search id to include.")
@output_options
@click.pass_obj
def link_encode(
    ctx: CLIContext,
    expression: str,
    *,
    text_query: str | None,
    collection: str | None,
) -> None:
    """Build a share URL carrying EXPR."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        expr = parse(expression)
        canonical = to_string(expr)
        params = DeepLinkParams(q=text_query, expr=canonical, collection=collection)
        return CommandOutput(
            data={
                "expression": canonical,
                "param": expression_to_url_param(expr),
                "url": build_share_url(ctx.resolve_base_url(), params),
            },
        )

    run_command(ctx, command="link encode", fn=fn)


@link_group.command(name="decode", cls=RichCommand)
@click.argument("url")
@output_options
@click.pass_obj
def link_decode(ctx: CLIContext, url: str) -> None:
    """Read the search state back out of a share URL."""

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        if "?" not in url:
            raise CLIError.usage(f"URL has no query string: {url}")
        params = parse_share_url(url)
        expression: str | None = None
        if params.expr:
            result = validate(params.expr)
            if result.valid:
                expression = to_string(parse(params.expr))
            else:
                warnings.append(f"Ignoring invalid expression in link: {result.error}")
        return CommandOutput(
            data={
                "q": params.q,
                "expr": params.expr,
                "collection": params.collection,
                "expression": expression,
            },
        )

    run_command(ctx, command="link decode", fn=fn)
