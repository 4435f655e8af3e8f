"""Commands operating on a single expression: parse, validate, tags, eval."""

from __future__ import annotations

from tagquery import evaluate, extract_tags, parse, to_string, validate

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import expression_argument, output_options, split_tag_values
from ..runner import CommandOutput, run_command


@click.command(name="parse", cls=RichCommand)
@expression_argument
@output_options
@click.pass_obj
def parse_cmd(ctx: CLIContext, expression: str) -> None:
    """Parse EXPR and show its canonical form and tree."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        expr = parse(expression)
        return CommandOutput(
            data={"expression": to_string(expr), "tree": expr.to_dict()},
        )

    run_command(ctx, command="parse", fn=fn)


@click.command(name="validate", cls=RichCommand)
@expression_argument
@output_options
@click.pass_obj
def validate_cmd(ctx: CLIContext, expression: str) -> None:
    """Check EXPR syntax. Exits 1 when the expression is invalid."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        result = validate(expression)
        return CommandOutput(data=result.to_dict(), exit_code=0 if result.valid else 1)

    run_command(ctx, command="validate", fn=fn)


@click.command(name="tags", cls=RichCommand)
@expression_argument
@output_options
@click.pass_obj
def tags_cmd(ctx: CLIContext, expression: str) -> None:
    """List the tags referenced by EXPR, in order of first appearance."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        return CommandOutput(data=extract_tags(parse(expression)))

    run_command(ctx, command="tags", fn=fn)


@click.command(name="eval", cls=RichCommand)
@expression_argument
@click.option(
    "--tag",
    "-t",
    "tag_values",
    multiple=True,
    help="Tag of the candidate item (repeatable, or comma-separated).",
)
@output_options
@click.pass_obj
def eval_cmd(ctx: CLIContext, expression: str, *, tag_values: tuple[str, ...]) -> None:
    """Evaluate EXPR against a set of tags.

    Example: tagquery eval "ai AND NOT deprecated" --tag ai --tag analysis
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        expr = parse(expression)
        tags = split_tag_values(tag_values)
        if not tags:
            warnings.append("No --tag values given; evaluating against an empty tag set.")
        return CommandOutput(
            data={"expression": to_string(expr), "tags": tags, "matches": evaluate(expr, tags)},
        )

    run_command(ctx, command="eval", fn=fn)
