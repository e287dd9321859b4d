from __future__ import annotations

from workspace_mcp.index import FileIndexEntry, FilePriority, rank_entries, score_entry


def _entry(path: str, priority: FilePriority = FilePriority.CODE) -> FileIndexEntry:
    name = path.rsplit("/", 1)[-1]
    extension = "." + name.rsplit(".", 1)[-1] if "." in name else ""
    return FileIndexEntry(
        path=path, name=name, size=1, mtime_ms=0, priority=priority, extension=extension
    )


def test_shorter_path_ranks_first_for_same_name() -> None:
    entries = [_entry("src/deep/nested/app.js"), _entry("src/app.js")]

    hits = rank_entries(entries, "app.js", limit=10)

    assert [hit.entry.path for hit in hits] == ["src/app.js", "src/deep/nested/app.js"]


def test_score_tiers() -> None:
    entry = _entry("src/server/main.py")

    assert score_entry(entry, "src/server/main.py") == 1000
    assert score_entry(entry, "main.py") == 900
    assert score_entry(entry, "server/ma") == 500 + (100 - len("src/server/main.py"))
    assert score_entry(entry, "zzz") == 0


def test_exact_path_beats_name_match() -> None:
    entries = [_entry("config.json"), _entry("app/config.json")]

    hits = rank_entries(entries, "app/config.json", limit=10)

    assert hits[0].entry.path == "app/config.json"
    assert hits[0].score == 1000


def test_priority_breaks_score_ties() -> None:
    entries = [
        _entry("docs/setup.md", FilePriority.DOCS),
        _entry("code/setup.py", FilePriority.CODE),
    ]

    hits = rank_entries(entries, "setup", limit=10)

    assert [hit.entry.path for hit in hits] == ["code/setup.py", "docs/setup.md"]


def test_query_is_case_insensitive_and_normalizes_backslashes() -> None:
    hits = rank_entries([_entry("Src/App.js")], "src\\APP", limit=10)

    assert [hit.entry.path for hit in hits] == ["Src/App.js"]


def test_limit_and_empty_query() -> None:
    entries = [_entry(f"pkg/mod{number}.py") for number in range(5)]

    assert len(rank_entries(entries, "mod", limit=2)) == 2
    assert rank_entries(entries, "   ", limit=2) == []
