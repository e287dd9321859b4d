from __future__ import annotations

from pathlib import Path

import pytest

from workspace_mcp.config import CliOverrides
from workspace_mcp.server import StdioServer, create_server


@pytest.fixture()
def server(tmp_path: Path) -> StdioServer:
    (tmp_path / "ten.txt").write_text("\n".join(str(n) for n in range(1, 11)), encoding="utf-8")
    return create_server(workspace_root=tmp_path, environ={})


def _text(response: dict[str, object]) -> str:
    result = response["result"]
    assert isinstance(result, dict)
    return result["content"][0]["text"]


def test_access_denied_is_blocked_tool_error(server: StdioServer) -> None:
    response = server.handle_payload(
        {"id": "r1", "method": "read_file", "params": {"path": "../../etc/passwd"}}
    )

    assert response["ok"] is False
    assert response["blocked"] is True
    assert response["result"]["isError"] is True
    assert _text(response).startswith("Error: Access denied - path outside workspace")
    assert response["error"]["code"] == "ACCESS_DENIED"


def test_invalid_range_includes_remediation(server: StdioServer) -> None:
    response = server.handle_payload(
        {
            "id": "r2",
            "method": "edit_file",
            "params": {"path": "ten.txt", "line_start": 5, "line_end": 3, "new_content": "x"},
        }
    )

    text = _text(response)
    assert response["blocked"] is False
    assert response["result"]["isError"] is True
    assert response["error"]["code"] == "INVALID_RANGE"
    assert "precedes line_start 5" in text
    assert "File has 10 lines total" in text


def test_no_match_echoes_old_text(server: StdioServer) -> None:
    response = server.handle_payload(
        {
            "id": "r3",
            "method": "tools/call",
            "params": {
                "name": "edit_file_advanced",
                "arguments": {
                    "path": "ten.txt",
                    "edits": [{"oldText": "eleven", "newText": "11"}],
                },
            },
        }
    )

    assert response["error"]["code"] == "NO_MATCH_FOUND"
    assert _text(response).startswith("Error: Could not find exact match for edit:\neleven")


def test_missing_argument_is_invalid_params(server: StdioServer) -> None:
    response = server.handle_payload({"id": "r4", "method": "write_file", "params": {}})

    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "write_file path must be a non-empty string.",
    }
    assert response["result"]["isError"] is True


def test_unknown_tool_and_malformed_json(server: StdioServer) -> None:
    unknown = server.handle_payload({"id": 9, "method": "nope", "params": {}})
    malformed = server.handle_json_line("{not-json")

    assert unknown["request_id"] == "9"
    assert unknown["error"] == {"code": "UNKNOWN_TOOL", "message": "Unknown tool: nope"}
    assert malformed["error"]["code"] == "INVALID_JSON"
    assert str(malformed["request_id"]).startswith("req-")


def test_invalid_tools_call_arguments(server: StdioServer) -> None:
    response = server.handle_payload(
        {"id": "r5", "method": "tools/call", "params": {"name": "read_file", "arguments": []}}
    )

    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "tools/call params.arguments must be an object.",
    }


def test_unexpected_exception_becomes_internal_error(
    server: StdioServer, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode(query: str, limit: int) -> list[str]:
        raise RuntimeError("boom")

    monkeypatch.setattr(server.context.file_index, "search", explode)

    response = server.handle_payload(
        {"id": "r6", "method": "fast_find_file", "params": {"file_path": "ten"}}
    )

    assert response["ok"] is False
    assert response["error"]["code"] == "INTERNAL_ERROR"


def test_oversized_response_is_blocked(tmp_path: Path) -> None:
    (tmp_path / "big.txt").write_text("x" * 4096, encoding="utf-8")
    server = create_server(
        workspace_root=tmp_path,
        cli_overrides=CliOverrides(max_total_bytes_per_response=1024),
        environ={},
    )

    response = server.handle_payload(
        {"id": "r7", "method": "read_file", "params": {"path": "big.txt"}}
    )

    assert response["blocked"] is True
    assert "max_total_bytes_per_response" in _text(response)


@pytest.mark.parametrize("tool", ["write_file", "append_to_file"])
def test_unencodable_content_is_invalid_params(
    server: StdioServer, tmp_path: Path, tool: str
) -> None:
    response = server.handle_payload(
        {"id": "r8", "method": tool, "params": {"path": "fresh.txt", "content": "\ud800"}}
    )

    assert response["error"]["code"] == "INVALID_PARAMS"
    assert "cannot be encoded as UTF-8" in _text(response)
    assert not (tmp_path / "fresh.txt").exists()


def test_file_used_as_directory_reports_parent_missing(
    server: StdioServer, tmp_path: Path
) -> None:
    response = server.handle_payload(
        {"id": "r9", "method": "write_file", "params": {"path": "ten.txt/new.txt", "content": "x"}}
    )

    assert response["blocked"] is False
    assert response["error"]["code"] == "PARENT_MISSING"
    assert "is not a directory" in _text(response)
    assert (tmp_path / "ten.txt").is_file()
