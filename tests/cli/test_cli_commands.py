from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from tagquery.cli.main import cli


def _invoke_json(args: list[str], **kwargs: Any) -> tuple[int, dict[str, Any]]:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", *args], **kwargs)
    return result.exit_code, json.loads(result.output)


# =============================================================================
# Expression commands
# =============================================================================


@pytest.mark.req("CLI-001")
def test_parse_json_envelope() -> None:
    code, payload = _invoke_json(["parse", "ai and analysis OR writing"])
    assert code == 0
    assert payload["ok"] is True
    assert payload["command"] == "parse"
    assert payload["data"]["expression"] == "ai AND analysis OR writing"
    assert payload["data"]["tree"]["type"] == "or"
    assert payload["data"]["tree"]["value"][0]["type"] == "and"
    assert "durationMs" in payload["meta"]


@pytest.mark.req("CLI-002")
def test_parse_syntax_error_exits_2() -> None:
    code, payload = _invoke_json(["parse", "(ai AND analysis"])
    assert code == 2
    assert payload["ok"] is False
    assert payload["error"]["type"] == "syntax_error"
    assert payload["error"]["message"] == "Unbalanced parentheses in expression"


def test_parse_table_output_shows_tree() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "ai AND NOT deprecated"])
    assert result.exit_code == 0
    assert "ai AND NOT deprecated" in result.output
    assert "tag deprecated" in result.output


def test_syntax_error_table_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", ""])
    assert result.exit_code == 2
    assert "Syntax error: Empty expression" in result.output
    assert "Hint:" in result.output


def test_validate_valid_and_invalid() -> None:
    code, payload = _invoke_json(["validate", "(ai AND analysis) OR writing"])
    assert code == 0
    assert payload["data"] == {"valid": True}

    code, payload = _invoke_json(["validate", ""])
    assert code == 1
    assert payload["ok"] is True
    assert payload["data"] == {"valid": False, "error": "Empty expression"}


def test_tags_command() -> None:
    code, payload = _invoke_json(["tags", "a AND b OR c AND NOT d OR a"])
    assert code == 0
    assert payload["data"] == ["a", "b", "c", "d"]


@pytest.mark.parametrize(
    ("tag_args", "matches"),
    [
        (["--tag", "ai", "--tag", "analysis"], True),
        (["-t", "AI,Analysis"], True),
        (["--tag", "ai"], False),
        (["--tag", "writing"], True),
    ],
)
def test_eval_command(tag_args: list[str], matches: bool) -> None:
    code, payload = _invoke_json(["eval", "ai AND analysis OR writing", *tag_args])
    assert code == 0
    assert payload["data"]["matches"] is matches


def test_eval_without_tags_warns() -> None:
    code, payload = _invoke_json(["eval", "NOT deprecated"])
    assert code == 0
    assert payload["data"]["matches"] is True
    assert payload["warnings"]


# =============================================================================
# filter
# =============================================================================


def test_filter_command(tmp_path: Path) -> None:
    items_path = tmp_path / "items.json"
    items_path.write_text(
        json.dumps(
            [
                {"id": "1", "title": "Papers", "tags": ["ai", "analysis"]},
                {"id": "2", "title": "Story", "tags": ["writing"]},
                {"id": "3", "title": "Old", "tags": ["ai", "deprecated"]},
                {"id": "4", "title": "Gone", "tags": ["ai"], "isArchived": True},
            ]
        ),
        encoding="utf-8",
    )

    code, payload = _invoke_json(["filter", "ai AND NOT deprecated", "--items", str(items_path)])
    assert code == 0
    assert payload["data"]["total"] == 4
    assert payload["data"]["matched"] == 1
    assert payload["data"]["items"] == [{"id": "1", "title": "Papers", "tags": ["ai", "analysis"]}]

    code, payload = _invoke_json(
        ["filter", "ai AND NOT deprecated", "--items", str(items_path), "--include-archived"]
    )
    assert [item["id"] for item in payload["data"]["items"]] == ["1", "4"]


def test_filter_missing_items_file(tmp_path: Path) -> None:
    code, payload = _invoke_json(["filter", "ai", "--items", str(tmp_path / "missing.json")])
    assert code == 1
    assert "not found" in payload["error"]["message"]


# =============================================================================
# link
# =============================================================================


def test_link_encode_uses_base_url_option() -> None:
    code, payload = _invoke_json(
        [
            "--base-url",
            "https://share.example.com",
            "link",
            "encode",
            "ai or writing",
            "--query",
            "summaries",
        ]
    )
    assert code == 0
    assert payload["data"]["expression"] == "ai OR writing"
    assert payload["data"]["param"] == "ai%20OR%20writing"
    assert payload["data"]["url"] == "https://share.example.com/?q=summaries&expr=ai+OR+writing"


def test_link_encode_uses_environment_base_url() -> None:
    code, payload = _invoke_json(
        ["link", "encode", "ai"],
        env={"TAGQUERY_BASE_URL": "https://env.example.com"},
    )
    assert code == 0
    assert payload["data"]["url"] == "https://env.example.com/?expr=ai"


def test_link_encode_rejects_bad_base_url() -> None:
    code, payload = _invoke_json(["--base-url", "not-a-url", "link", "encode", "ai"])
    assert code == 2
    assert payload["error"]["type"] == "usage_error"


def test_link_encode_table_prints_url() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--base-url", "https://share.example.com", "link", "encode", "NOT (a OR b)"]
    )
    assert result.exit_code == 0
    assert "https://share.example.com/?expr=NOT+%28a+OR+b%29" in result.output


def test_link_decode() -> None:
    code, payload = _invoke_json(
        ["link", "decode", "https://share.example.com/?q=x&expr=ai+and+analysis"]
    )
    assert code == 0
    assert payload["data"]["q"] == "x"
    assert payload["data"]["expr"] == "ai and analysis"
    assert payload["data"]["expression"] == "ai AND analysis"


def test_link_decode_invalid_expression_warns() -> None:
    code, payload = _invoke_json(["link", "decode", "https://share.example.com/?expr=%28ai"])
    assert code == 0
    assert payload["data"]["expression"] is None
    assert payload["warnings"]


# =============================================================================
# saved
# =============================================================================


def test_saved_search_lifecycle(tmp_path: Path) -> None:
    store = str(tmp_path / "saved.json")

    code, payload = _invoke_json(["--store", store, "saved", "add", "AI", "ai AND NOT deprecated"])
    assert code == 0
    search_id = payload["data"]["id"]
    assert payload["data"]["expression"] == "ai AND NOT deprecated"

    code, payload = _invoke_json(["--store", store, "saved", "list"])
    assert code == 0
    assert [s["id"] for s in payload["data"]] == [search_id]

    code, payload = _invoke_json(["--store", store, "saved", "show", search_id])
    assert code == 0
    assert payload["data"]["tree"]["type"] == "and"

    code, payload = _invoke_json(["--store", store, "saved", "remove", search_id])
    assert code == 0
    assert payload["data"]["removed"] is True

    code, payload = _invoke_json(["--store", store, "saved", "list"])
    assert payload["data"] == []


def test_saved_store_from_environment(tmp_path: Path) -> None:
    store = tmp_path / "env_saved.json"
    code, _ = _invoke_json(["saved", "add", "W", "writing"], env={"TAGQUERY_STORE": str(store)})
    assert code == 0
    assert store.exists()


def test_saved_add_invalid_expression(tmp_path: Path) -> None:
    store = str(tmp_path / "saved.json")
    code, payload = _invoke_json(["--store", store, "saved", "add", "Bad", "(a"])
    assert code == 2
    assert payload["error"]["type"] == "usage_error"


def test_saved_show_unknown_exits_4(tmp_path: Path) -> None:
    store = str(tmp_path / "saved.json")
    code, payload = _invoke_json(["--store", store, "saved", "show", "missing"])
    assert code == 4
    assert payload["error"]["type"] == "not_found"


# =============================================================================
# misc
# =============================================================================


def test_no_subcommand_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "parse" in result.output


def test_version_command() -> None:
    code, payload = _invoke_json(["version"])
    assert code == 0
    assert payload["data"]["version"] == "0.1.0"


def test_subcommand_json_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["tags", "a OR b", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["data"] == ["a", "b"]
