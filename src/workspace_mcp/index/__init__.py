"""File catalog and lookup package."""

from .discovery import (
    build_entries,
    collect_files,
    get_file_priority,
    is_hidden_name,
    should_skip_directory,
    should_skip_file,
)
from .manager import FileIndex
from .models import FileIndexEntry, FilePriority, IndexSnapshot, IndexStats
from .search import SearchHit, rank_entries, score_entry

__all__ = [
    "FileIndex",
    "FileIndexEntry",
    "FilePriority",
    "IndexSnapshot",
    "IndexStats",
    "SearchHit",
    "build_entries",
    "collect_files",
    "get_file_priority",
    "is_hidden_name",
    "rank_entries",
    "score_entry",
    "should_skip_directory",
    "should_skip_file",
]
