"""Filtered workspace traversal that prunes heavy directories early."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from workspace_mcp.config import IndexConfig
from workspace_mcp.index.models import FileIndexEntry, FilePriority

logger = logging.getLogger(__name__)

CODE_EXTENSIONS = frozenset(
    {
        ".py",
        ".js",
        ".ts",
        ".jsx",
        ".tsx",
        ".java",
        ".cpp",
        ".c",
        ".h",
        ".cs",
        ".php",
        ".rb",
        ".go",
        ".rs",
        ".swift",
        ".kt",
        ".scala",
    }
)
CONFIG_EXTENSIONS = frozenset({".json", ".yaml", ".yml", ".toml", ".ini", ".cfg", ".conf"})
DOC_EXTENSIONS = frozenset({".md", ".txt", ".rst", ".adoc"})
PRIORITY_FILE_NAMES = frozenset(
    {"package.json", "requirements.txt", "dockerfile", "makefile", "readme.md", "pyproject.toml"}
)
HIDDEN_NAME_EXCEPTIONS = (".gitignore", ".env.example")


@dataclass(slots=True, frozen=True)
class CandidateFile:
    """File that survived name-based filtering during traversal."""

    relative_path: str
    full_path: Path


def is_hidden_name(name: str) -> bool:
    """Return True for dot-names, except the allowed project dotfiles."""
    return name.startswith(".") and not name.endswith(HIDDEN_NAME_EXCEPTIONS)


def should_skip_directory(name: str, relative_path: str, skip_dirs: frozenset[str]) -> bool:
    """Return True when a directory must not be descended into."""
    if is_hidden_name(name) or name in skip_dirs:
        return True
    return relative_path in skip_dirs


def should_skip_file(name: str) -> bool:
    """Return True when a file is excluded by the hidden-name rule."""
    return is_hidden_name(name)


def get_file_priority(name: str, extension: str) -> FilePriority:
    """Rank a file by name and extension for search tie-breaking."""
    lowered = name.lower()
    if lowered in PRIORITY_FILE_NAMES:
        return FilePriority.CRITICAL
    if extension in CODE_EXTENSIONS:
        return FilePriority.CODE
    if extension in CONFIG_EXTENSIONS:
        return FilePriority.CONFIG
    if extension in DOC_EXTENSIONS:
        return FilePriority.DOCS
    return FilePriority.OTHER


def collect_files(root: Path, skip_dirs: frozenset[str]) -> Iterator[CandidateFile]:
    """Walk depth-first, never entering skipped directories.

    Symlinked entries are not followed, so the walk cannot leave the root.
    Unreadable directories are logged and skipped.
    """
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            logger.warning("Cannot read directory %s: %s", current, error)
            continue
        directories: list[Path] = []
        for entry in ordered_entries:
            full_path = Path(entry.path)
            relative = full_path.relative_to(root).as_posix()
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as error:
                logger.warning("Cannot inspect %s: %s", full_path, error)
                continue
            if is_dir:
                if not should_skip_directory(entry.name, relative, skip_dirs):
                    directories.append(full_path)
                continue
            if not is_file or should_skip_file(entry.name):
                continue
            yield CandidateFile(relative_path=relative, full_path=full_path)
        stack.extend(reversed(directories))


def build_entries(
    root: Path,
    config: IndexConfig,
    max_file_bytes: int,
) -> dict[str, FileIndexEntry]:
    """Stat every surviving file and build catalog entries keyed by relative path."""
    started = time.perf_counter()
    entries: dict[str, FileIndexEntry] = {}
    processed = 0
    for candidate in collect_files(root.resolve(), config.skip_dirs):
        try:
            stat = candidate.full_path.stat()
        except OSError as error:
            logger.warning("Error indexing %s: %s", candidate.relative_path, error)
            continue
        if stat.st_size > max_file_bytes:
            logger.debug(
                "Skipping large file: %s (%d bytes)", candidate.relative_path, stat.st_size
            )
            continue
        name = candidate.full_path.name
        extension = candidate.full_path.suffix.lower()
        entries[candidate.relative_path] = FileIndexEntry(
            path=candidate.relative_path,
            name=name,
            size=stat.st_size,
            mtime_ms=stat.st_mtime_ns // 1_000_000,
            priority=get_file_priority(name, extension),
            extension=extension,
        )
        processed += 1
        if processed % config.progress_interval == 0:
            logger.info("Indexed %d files...", processed)
    logger.info(
        "File index built: %d files indexed in %dms",
        len(entries),
        int((time.perf_counter() - started) * 1000),
    )
    return entries
