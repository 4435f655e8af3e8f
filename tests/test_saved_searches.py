"""Tests for saved searches and their JSON store."""

from __future__ import annotations

import json
import uuid
from pathlib import Path

import pytest
from pydantic import ValidationError

from tagquery import Expression, SavedSearchNotFoundError, SavedSearchStoreError, parse
from tagquery.saved_searches import SavedSearch, SavedSearchStore

# =============================================================================
# SavedSearch model
# =============================================================================


def test_create_assigns_uuid_and_strips_expression() -> None:
    search = SavedSearch.create("AI research", "  ai AND NOT deprecated ")
    uuid.UUID(search.id)
    assert search.name == "AI research"
    assert search.expression == "ai AND NOT deprecated"
    assert search.query is None


def test_create_from_expression_tree_stores_canonical_text() -> None:
    search = SavedSearch.create("x", parse("a or b and not c"), query="summaries")
    assert search.expression == "a OR b AND NOT c"
    assert search.query == "summaries"


def test_invalid_expression_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unbalanced parentheses"):
        SavedSearch.create("broken", "(a AND b")


def test_empty_name_is_rejected() -> None:
    with pytest.raises(ValidationError):
        SavedSearch.create("", "a")


def test_legacy_record_with_tree_and_created_at() -> None:
    search = SavedSearch.model_validate(
        {
            "id": "1",
            "name": "Legacy",
            "createdAt": 1700000000000,
            "expression": {
                "type": "and",
                "value": [{"type": "tag", "value": "a"}, {"type": "tag", "value": "b"}],
            },
        }
    )
    assert search.expression == "a AND b"
    assert "createdAt" not in search.model_dump(by_alias=True)


def test_parsed_and_matches() -> None:
    search = SavedSearch.create("x", "ai AND analysis OR writing")
    assert search.parsed() == parse("ai AND analysis OR writing")
    assert search.matches(["writing"]) is True
    assert search.matches(["ai"]) is False


# =============================================================================
# SavedSearchStore
# =============================================================================


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "saved_searches.json"


def test_missing_file_is_empty(store_path: Path) -> None:
    assert SavedSearchStore(store_path).list() == []
    assert not store_path.exists()


def test_add_persists_to_disk(store_path: Path) -> None:
    store = SavedSearchStore(store_path)
    search = store.add(SavedSearch.create("AI", "ai AND NOT deprecated", query="notes"))

    written = json.loads(store_path.read_text(encoding="utf-8"))
    assert written == [
        {"id": search.id, "name": "AI", "expression": "ai AND NOT deprecated", "query": "notes"}
    ]

    reloaded = SavedSearchStore(store_path)
    assert reloaded.list() == [search]
    assert reloaded.get(search.id) == search


def test_add_duplicate_id_raises(store_path: Path) -> None:
    store = SavedSearchStore(store_path)
    search = store.add(SavedSearch.create("AI", "ai"))
    with pytest.raises(SavedSearchStoreError, match="already exists"):
        store.add(search)


def test_update_replaces_record(store_path: Path) -> None:
    store = SavedSearchStore(store_path)
    search = store.add(SavedSearch.create("AI", "ai"))
    updated = search.model_copy(update={"name": "AI only"})
    store.update(updated)
    assert SavedSearchStore(store_path).get(search.id).name == "AI only"


def test_update_unknown_raises(store_path: Path) -> None:
    with pytest.raises(SavedSearchNotFoundError):
        SavedSearchStore(store_path).update(SavedSearch.create("x", "a"))


def test_remove(store_path: Path) -> None:
    store = SavedSearchStore(store_path)
    keep = store.add(SavedSearch.create("keep", "a"))
    drop = store.add(SavedSearch.create("drop", "b"))

    assert store.remove(drop.id) == drop
    assert [s.id for s in SavedSearchStore(store_path).list()] == [keep.id]


def test_get_and_remove_unknown_raise(store_path: Path) -> None:
    store = SavedSearchStore(store_path)
    with pytest.raises(SavedSearchNotFoundError) as exc_info:
        store.get("nope")
    assert exc_info.value.search_id == "nope"
    with pytest.raises(SavedSearchNotFoundError):
        store.remove("nope")


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("[", "not valid JSON"),
        ('{"id": "1"}', "JSON array"),
        ('[{"id": "1", "name": "x", "expression": ""}]', "Invalid saved search"),
    ],
)
def test_load_rejects_bad_files(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "saved.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SavedSearchStoreError, match=message):
        SavedSearchStore(path).load()


def test_load_migrates_legacy_records(tmp_path: Path) -> None:
    path = tmp_path / "saved.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "1",
                    "name": "Legacy",
                    "createdAt": 1700000000000,
                    "expression": {"type": "not", "value": [{"type": "tag", "value": "old"}]},
                }
            ]
        ),
        encoding="utf-8",
    )

    searches = SavedSearchStore(path).load()

    assert searches[0].parsed() == Expression.not_(Expression.tag("old"))
    assert json.loads(path.read_text(encoding="utf-8")) == [
        {"id": "1", "name": "Legacy", "expression": "NOT old"}
    ]


def test_load_rejects_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "saved.json"
    path.write_bytes(b"[\xff\xfe]")
    with pytest.raises(SavedSearchStoreError, match="not valid UTF-8"):
        SavedSearchStore(path).load()


# =============================================================================
# Trees whose canonical text parses differently
# =============================================================================

AND_OVER_OR_TREE = {
    "type": "and",
    "value": [
        {"type": "tag", "value": "c"},
        {
            "type": "or",
            "value": [{"type": "tag", "value": "a"}, {"type": "tag", "value": "b"}],
        },
    ],
}


def test_create_keeps_tree_when_text_changes_meaning() -> None:
    tree = Expression.from_dict(AND_OVER_OR_TREE)
    search = SavedSearch.create("c and a-or-b", tree)

    assert search.expression == "c AND (a OR b)"
    assert search.tree == AND_OVER_OR_TREE
    assert search.parsed() == tree
    assert search.matches(["b"]) is False
    assert search.matches(["c", "b"]) is True


def test_create_from_faithful_tree_stores_text_only() -> None:
    search = SavedSearch.create("x", parse("(a AND b) OR c"))
    assert search.tree is None


def test_legacy_tree_record_keeps_its_meaning_across_migration(tmp_path: Path) -> None:
    path = tmp_path / "saved.json"
    path.write_text(
        json.dumps([{"id": "1", "name": "Mixed", "expression": AND_OVER_OR_TREE}]),
        encoding="utf-8",
    )

    loaded = SavedSearchStore(path).load()[0]
    assert loaded.matches(["b"]) is False
    assert loaded.parsed() == Expression.from_dict(AND_OVER_OR_TREE)

    written = json.loads(path.read_text(encoding="utf-8"))
    assert written == [
        {"id": "1", "name": "Mixed", "expression": "c AND (a OR b)", "tree": AND_OVER_OR_TREE}
    ]

    reloaded = SavedSearchStore(path).get("1")
    assert reloaded.matches(["b"]) is False
    assert reloaded.matches(["a", "c"]) is True


def test_invalid_tree_field_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown expression type"):
        SavedSearch.model_validate(
            {"id": "1", "name": "x", "expression": "a", "tree": {"type": "xor", "value": []}}
        )
