"""STDIO server entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from workspace_mcp.config import (
    CliOverrides,
    ServerConfig,
    load_effective_config,
    resolve_workspace_root,
)
from workspace_mcp.errors import AccessDeniedError, WorkspaceError
from workspace_mcp.logging import JsonlAuditLogger, Outcome, build_event, configure_debug_logging
from workspace_mcp.tools.builtin import register_builtin_tools
from workspace_mcp.tools.registry import ToolDispatchError, ToolRegistry
from workspace_mcp.workspace import WorkspaceContext

logger = logging.getLogger(__name__)

LIST_TOOLS_METHOD = "tools/list"
CALL_TOOL_METHOD = "tools/call"


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="workspace-mcp")
    parser.add_argument("--workspace-root", required=False, default=None)
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--max-file-bytes", type=int, required=False, default=None)
    parser.add_argument("--max-find-results", type=int, required=False, default=None)
    parser.add_argument("--disable-file-index", action="store_true")
    parser.add_argument("--debug", action="store_true")
    return parser


class StdioServer:
    """JSON-lines server routing requests to workspace tools."""

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._limits = config.limits
        self._context = WorkspaceContext.from_config(config)
        self._audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
        self._registry = ToolRegistry()
        register_builtin_tools(self._registry, self._context)
        self._fallback_request_counter = 0
        if self._context.file_index.enabled:
            self._context.file_index.build()

    @property
    def context(self) -> WorkspaceContext:
        return self._context

    @property
    def config(self) -> ServerConfig:
        return self._config

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from stdin and write JSON-line responses."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        if request.method == LIST_TOOLS_METHOD:
            response = self.success_response(
                request_id=request.request_id,
                result={"tools": self._registry.definitions()},
            )
            self.log_request(request.request_id, LIST_TOOLS_METHOD, {}, response)
            return response

        tool_name: str
        arguments: dict[str, object]
        if request.method == CALL_TOOL_METHOD:
            tool_name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if not isinstance(tool_name_value, str) or not tool_name_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.name must be a non-empty string.",
                )
            if not isinstance(arguments_value, dict):
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.arguments must be an object.",
                )
            tool_name = tool_name_value
            arguments = arguments_value
        else:
            tool_name = request.method
            arguments = request.params

        try:
            result = self._registry.dispatch(name=tool_name, arguments=arguments)
        except WorkspaceError as error:
            response = self.tool_failure_response(request_id=request.request_id, error=error)
        except ToolDispatchError as error:
            response = self.error_response(
                request_id=request.request_id,
                code=error.code,
                message=error.message,
            )
        except Exception:
            logger.exception("Unhandled error in tool %s", tool_name)
            response = self.error_response(
                request_id=request.request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing tool.",
            )
        else:
            response = self.enforce_response_size_limit(
                request_id=request.request_id,
                response=self.success_response(request_id=request.request_id, result=result),
            )
        self.log_request(
            request_id=request.request_id,
            tool_name=tool_name,
            arguments=arguments,
            response=response,
        )
        return response

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize deterministic fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int) and not isinstance(request_id, bool):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(request_id: str, result: dict[str, object]) -> dict[str, object]:
        """Build success envelope."""
        return {
            "request_id": request_id,
            "ok": True,
            "result": result,
            "warnings": [],
            "blocked": False,
        }

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope for protocol-level failures."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "warnings": [],
            "blocked": False,
            "error": {"code": code, "message": message},
        }

    @staticmethod
    def tool_failure_response(request_id: str, error: WorkspaceError) -> dict[str, object]:
        """Render a labeled workspace failure as an isError tool result."""
        text = f"Error: {error.message}"
        if error.hint:
            text = f"{text}\n\n{error.hint}"
        return {
            "request_id": request_id,
            "ok": False,
            "result": {"content": [{"type": "text", "text": text}], "isError": True},
            "warnings": [],
            "blocked": isinstance(error, AccessDeniedError),
            "error": {"code": error.code, "message": error.message},
        }

    def enforce_response_size_limit(
        self,
        request_id: str,
        response: dict[str, object],
    ) -> dict[str, object]:
        """Block responses that exceed max_total_bytes_per_response."""
        response_bytes = len(json.dumps(response, sort_keys=True).encode("utf-8"))
        if response_bytes <= self._limits.max_total_bytes_per_response:
            return response
        return self.tool_failure_response(
            request_id=request_id,
            error=AccessDeniedError(
                "Response exceeds max_total_bytes_per_response limit.",
                hint="Request fewer lines or lower result volume.",
            ),
        )

    def log_request(
        self,
        request_id: str,
        tool_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        """Append one audit event describing the request and its outcome."""
        error_payload = response.get("error")
        error_code: str | None = None
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str):
                error_code = code_value
        if response.get("blocked"):
            outcome = Outcome.BLOCKED
        elif response.get("ok"):
            outcome = Outcome.OK
        else:
            outcome = Outcome.ERROR
        self._audit_logger.append(
            build_event(request_id, tool_name, arguments, outcome, error_code=error_code)
        )


def create_server(
    workspace_root: str | Path,
    data_dir: str | None = None,
    cli_overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> StdioServer:
    """Create a configured STDIO server instance."""
    overrides = cli_overrides or CliOverrides()
    if data_dir is not None and overrides.data_dir is None:
        overrides = CliOverrides(
            data_dir=Path(data_dir).resolve(),
            max_file_bytes=overrides.max_file_bytes,
            max_read_lines=overrides.max_read_lines,
            max_find_results=overrides.max_find_results,
            max_total_bytes_per_response=overrides.max_total_bytes_per_response,
            index_enabled=overrides.index_enabled,
            debug=overrides.debug,
        )
    config = load_effective_config(
        workspace_root=Path(workspace_root).resolve(),
        overrides=overrides,
        environ=environ,
    )
    return StdioServer(config=config)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the workspace server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        max_file_bytes=args.max_file_bytes,
        max_find_results=args.max_find_results,
        index_enabled=False if args.disable_file_index else None,
        debug=True if args.debug else None,
    )
    try:
        workspace_root = resolve_workspace_root(args.workspace_root)
        config = load_effective_config(workspace_root=workspace_root, overrides=overrides)
    except ValueError as error:
        parser.error(str(error))
    configure_debug_logging(config.logging.debug)
    logger.info("Serving workspace %s", config.workspace_root)
    server = StdioServer(config=config)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
