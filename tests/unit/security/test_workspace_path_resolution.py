from __future__ import annotations

import os
from pathlib import Path

import pytest

from workspace_mcp.errors import AccessDeniedError, ParentMissingError
from workspace_mcp.security import is_within, resolve_workspace_path


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")
    return root


def test_relative_path_resolves_inside_workspace(workspace: Path) -> None:
    resolved = resolve_workspace_path(workspace, "src/app.py")

    assert resolved == workspace.resolve() / "src" / "app.py"


@pytest.mark.parametrize("candidate", ["../outside.txt", "src/../../outside.txt", "../../etc"])
def test_parent_traversal_is_denied(workspace: Path, candidate: str) -> None:
    with pytest.raises(AccessDeniedError) as error:
        resolve_workspace_path(workspace, candidate)

    assert "path outside workspace" in error.value.message


def test_absolute_path_outside_root_is_denied(workspace: Path, tmp_path: Path) -> None:
    with pytest.raises(AccessDeniedError):
        resolve_workspace_path(workspace, str(tmp_path / "elsewhere.txt"))


def test_sibling_with_shared_prefix_is_denied(workspace: Path, tmp_path: Path) -> None:
    sibling = tmp_path / "workspace-other"
    sibling.mkdir()
    (sibling / "secret.txt").write_text("x", encoding="utf-8")

    with pytest.raises(AccessDeniedError):
        resolve_workspace_path(workspace, "../workspace-other/secret.txt")


def test_absolute_path_inside_root_is_allowed(workspace: Path) -> None:
    resolved = resolve_workspace_path(workspace, str(workspace / "src" / "app.py"))

    assert resolved.name == "app.py"


def test_symlink_escape_is_denied(workspace: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "leak.txt").write_text("secret", encoding="utf-8")
    (workspace / "link").symlink_to(outside, target_is_directory=True)

    with pytest.raises(AccessDeniedError) as error:
        resolve_workspace_path(workspace, "link/leak.txt")

    assert "symlink target outside workspace" in error.value.message


def test_new_file_under_escaping_symlink_is_denied(workspace: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (workspace / "link").symlink_to(outside, target_is_directory=True)

    with pytest.raises(AccessDeniedError) as error:
        resolve_workspace_path(workspace, "link/new.txt")

    assert "parent directory outside workspace" in error.value.message


def test_symlink_inside_workspace_resolves_to_target(workspace: Path) -> None:
    (workspace / "alias").symlink_to(workspace / "src", target_is_directory=True)

    resolved = resolve_workspace_path(workspace, "alias/app.py")

    assert resolved == (workspace / "src" / "app.py").resolve()


def test_new_file_resolves_through_real_parent(workspace: Path) -> None:
    resolved = resolve_workspace_path(workspace, "src/new_module.py")

    assert resolved == workspace.resolve() / "src" / "new_module.py"
    assert not resolved.exists()


def test_missing_parent_reports_parent_missing(workspace: Path) -> None:
    with pytest.raises(ParentMissingError) as error:
        resolve_workspace_path(workspace, "missing/dir/new.txt")

    assert error.value.message.startswith("Parent directory does not exist")
    assert "create_directory" in error.value.hint


@pytest.mark.parametrize("candidate", ["src/app.py/new.txt", "src/app.py/deeper/new.txt"])
def test_file_in_parent_position_reports_parent_missing(workspace: Path, candidate: str) -> None:
    with pytest.raises(ParentMissingError) as error:
        resolve_workspace_path(workspace, candidate)

    assert "is not a directory" in error.value.message


def test_backslash_separators_are_normalized(workspace: Path) -> None:
    resolved = resolve_workspace_path(workspace, "src\\app.py")

    assert resolved == workspace.resolve() / "src" / "app.py"


def test_home_prefix_is_expanded(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(workspace))

    resolved = resolve_workspace_path(workspace, "~/src/app.py")

    assert resolved == workspace.resolve() / "src" / "app.py"


def test_resolved_paths_always_have_root_prefix(workspace: Path) -> None:
    real_root = os.path.realpath(workspace)
    for candidate in ["src", "src/app.py", "./src/../src/app.py", ".", "src/new.txt"]:
        resolved = resolve_workspace_path(workspace, candidate)
        assert is_within(real_root, str(resolved)), candidate


def test_is_within_rejects_parent_and_accepts_root() -> None:
    assert is_within("/srv/ws", "/srv/ws")
    assert is_within("/srv/ws", "/srv/ws/a/b")
    assert not is_within("/srv/ws", "/srv")
    assert not is_within("/srv/ws", "/srv/ws-other")
