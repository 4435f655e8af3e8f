from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "syntax_error": "Syntax error",
        "not_found": "Not found",
        "io_error": "I/O error",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        if all(isinstance(v, str) for v in value):
            return ", ".join(value)
        return f"list ({len(value):,} items)"
    if isinstance(value, dict):
        return f"object ({len(value):,} keys)"
    return str(value)


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("field")
    table.add_column("value")
    for key, value in obj.items():
        table.add_row(Text(str(key)), Text(_format_value(value)))
    return table


def _table_from_rows(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    if not rows:
        table.add_column("result")
        table.add_row("No results")
        return table
    columns = list(rows[0].keys())
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[Text(_format_value(row.get(col))) for col in columns])
    return table


def _tree_text(node: dict[str, Any], depth: int = 0) -> list[str]:
    indent = "  " * depth
    if node.get("type") == "tag":
        return [f"{indent}tag {node.get('value')}"]
    lines = [f"{indent}{str(node.get('type', '?')).upper()}"]
    for child in node.get("value") or []:
        if isinstance(child, dict):
            lines.extend(_tree_text(child, depth + 1))
    return lines


def _render_human_data(data: Any) -> Any:
    if data is None:
        return None
    if isinstance(data, list):
        if all(isinstance(row, dict) for row in data):
            return _table_from_rows(data)
        if not data:
            return Text("No results")
        return Text("\n".join(str(v) for v in data))
    if isinstance(data, dict):
        tree = data.get("tree")
        if isinstance(tree, dict):
            scalars = {k: v for k, v in data.items() if k != "tree"}
            return Group(_kv_table(scalars), Panel.fit(Text("\n".join(_tree_text(tree)))))
        rows = data.get("items")
        if isinstance(rows, list) and all(isinstance(row, dict) for row in rows):
            scalars = {k: v for k, v in data.items() if k != "items"}
            return Group(_kv_table(scalars), _table_from_rows(rows))
        return _kv_table(data)
    return Text(str(data))


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is None:
            stderr.print("Error")
            return 0
        title = _error_title(result.error.type)
        stderr.print(f"{title}: {result.error.message}", markup=False, soft_wrap=True)
        if settings.quiet:
            return 0
        if result.error.hint:
            stderr.print(f"Hint: {result.error.hint}", markup=False, soft_wrap=True)
        if result.error.details and settings.verbosity >= 1:
            stderr.print(
                Panel.fit(Text(json.dumps(result.error.details, ensure_ascii=False, indent=2)))
            )
        return 0

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        renderable = Text(str(result.data.get("version", "")), style="bold")
    elif result.command == "link encode" and isinstance(result.data, dict):
        renderable = Text(str(result.data.get("url", "")))
    else:
        renderable = _render_human_data(result.data)

    if renderable is not None:
        stdout.print(renderable, soft_wrap=isinstance(renderable, Text))

    if result.warnings and not settings.quiet:
        for warning in result.warnings:
            stderr.print(f"Warning: {warning}", markup=False, soft_wrap=True)
    return 0
