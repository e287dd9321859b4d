"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from workspace_mcp.security import SecurityLimits

CONFIG_FILE_NAME = "workspace_mcp.toml"
DATA_DIR_NAME = ".workspace_mcp"

MAX_FILE_BYTES_CAP = 512 * 1024 * 1024
MAX_READ_LINES_CAP = 50_000
MAX_FIND_RESULTS_CAP = 200
MAX_TOTAL_BYTES_PER_RESPONSE_CAP = 16 * 1024 * 1024
PROGRESS_INTERVAL_CAP = 1_000_000
BYTES_PER_MB = 1024 * 1024

DEFAULT_PROGRESS_INTERVAL = 1000
DEFAULT_SKIP_DIRS = (
    # dependencies
    "node_modules",
    "vendor",
    "venv",
    "env",
    # build outputs
    "dist",
    "build",
    "out",
    "target",
    "bin",
    "obj",
    # framework and tool caches
    ".next",
    ".nuxt",
    "__pycache__",
    ".pytest_cache",
    ".nyc_output",
    # version control
    ".git",
    ".svn",
    ".hg",
    # editors
    ".vscode",
    ".idea",
    ".vs",
    # logs and temp
    "logs",
    "log",
    "tmp",
    "temp",
    "coverage",
    # nested outputs
    "public/build",
    "static/build",
    ".output",
    ".cache",
)

ENV_WORKSPACE_PATH = "WORKSPACE_PATH"
ENV_ENABLE_FILE_INDEXING = "ENABLE_FILE_INDEXING"
ENV_MAX_FILE_SIZE_MB = "MAX_FILE_SIZE_MB"
ENV_DEBUG_MODE = "DEBUG_MODE"


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """File catalog settings."""

    enabled: bool = True
    skip_dirs: frozenset[str] = frozenset(DEFAULT_SKIP_DIRS)
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Diagnostic logging settings."""

    debug: bool = False


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    workspace_root: Path
    data_dir: Path
    limits: SecurityLimits
    index: IndexConfig
    logging: LoggingConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for tool responses."""
        return {
            "workspace_root": str(self.workspace_root),
            "data_dir": str(self.data_dir),
            "limits": {
                "max_file_bytes": self.limits.max_file_bytes,
                "max_read_lines": self.limits.max_read_lines,
                "max_find_results": self.limits.max_find_results,
                "max_total_bytes_per_response": self.limits.max_total_bytes_per_response,
            },
            "index": {
                "enabled": self.index.enabled,
                "skip_dirs": sorted(self.index.skip_dirs),
                "progress_interval": self.index.progress_interval,
            },
            "logging": {"debug": self.logging.debug},
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    max_file_bytes: int | None = None
    max_read_lines: int | None = None
    max_find_results: int | None = None
    max_total_bytes_per_response: int | None = None
    index_enabled: bool | None = None
    debug: bool | None = None


def resolve_workspace_root(
    cli_value: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Pick the workspace root from CLI, then WORKSPACE_PATH, then the cwd."""
    env = os.environ if environ is None else environ
    raw = cli_value or env.get(ENV_WORKSPACE_PATH) or os.getcwd()
    root = Path(raw).expanduser().resolve()
    if not root.is_dir():
        raise ValueError(f"Workspace root is not a directory: {root}")
    return root


def default_config(workspace_root: Path) -> ServerConfig:
    """Build default config for a given workspace root."""
    resolved_root = workspace_root.resolve()
    return ServerConfig(
        workspace_root=resolved_root,
        data_dir=resolved_root / DATA_DIR_NAME,
        limits=SecurityLimits(),
        index=IndexConfig(),
        logging=LoggingConfig(),
    )


def load_workspace_config_file(workspace_root: Path) -> dict[str, object]:
    """Load optional workspace_mcp.toml from the workspace root."""
    config_path = workspace_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def merge_config(base: ServerConfig, file_payload: dict[str, object]) -> ServerConfig:
    """Merge defaults with the workspace config file."""
    limits_payload = _get_table(file_payload, "limits")
    index_payload = _get_table(file_payload, "index")
    logging_payload = _get_table(file_payload, "logging")

    limits = _merge_limits(
        base.limits,
        max_file_bytes=limits_payload.get("max_file_bytes"),
        max_read_lines=limits_payload.get("max_read_lines"),
        max_find_results=limits_payload.get("max_find_results"),
        max_total_bytes_per_response=limits_payload.get("max_total_bytes_per_response"),
        prefix="limits",
    )

    skip_dirs = base.index.skip_dirs
    if "skip_dirs" in index_payload:
        skip_dirs = frozenset(_tuple_of_strings(index_payload["skip_dirs"], "index", "skip_dirs"))
    index = IndexConfig(
        enabled=_optional_bool(index_payload.get("enabled"), "index.enabled", base.index.enabled),
        skip_dirs=skip_dirs,
        progress_interval=_optional_positive_int_with_cap(
            index_payload.get("progress_interval"),
            "index.progress_interval",
            base.index.progress_interval,
            PROGRESS_INTERVAL_CAP,
        ),
    )
    logging_config = LoggingConfig(
        debug=_optional_bool(logging_payload.get("debug"), "logging.debug", base.logging.debug)
    )
    return replace(base, limits=limits, index=index, logging=logging_config)


def apply_environment(config: ServerConfig, environ: Mapping[str, str]) -> ServerConfig:
    """Apply ENABLE_FILE_INDEXING, MAX_FILE_SIZE_MB, and DEBUG_MODE when set."""
    index = config.index
    raw_indexing = environ.get(ENV_ENABLE_FILE_INDEXING)
    if raw_indexing is not None:
        index = replace(index, enabled=raw_indexing.strip().lower() != "false")

    limits = config.limits
    raw_size = environ.get(ENV_MAX_FILE_SIZE_MB)
    if raw_size is not None:
        try:
            size_mb = int(raw_size.strip())
        except ValueError as error:
            raise ValueError(
                f"Environment variable '{ENV_MAX_FILE_SIZE_MB}' must be a positive integer."
            ) from error
        if size_mb < 1:
            raise ValueError(
                f"Environment variable '{ENV_MAX_FILE_SIZE_MB}' must be a positive integer."
            )
        limits = _merge_limits(limits, max_file_bytes=size_mb * BYTES_PER_MB, prefix="env")

    logging_config = config.logging
    raw_debug = environ.get(ENV_DEBUG_MODE)
    if raw_debug is not None:
        logging_config = LoggingConfig(debug=raw_debug.strip().lower() == "true")
    return replace(config, limits=limits, index=index, logging=logging_config)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    limits = _merge_limits(
        config.limits,
        max_file_bytes=overrides.max_file_bytes,
        max_read_lines=overrides.max_read_lines,
        max_find_results=overrides.max_find_results,
        max_total_bytes_per_response=overrides.max_total_bytes_per_response,
        prefix="overrides",
    )
    index = config.index
    if overrides.index_enabled is not None:
        index = replace(index, enabled=overrides.index_enabled)
    logging_config = config.logging
    if overrides.debug is not None:
        logging_config = LoggingConfig(debug=overrides.debug)
    data_dir = overrides.data_dir or config.data_dir
    return replace(
        config,
        data_dir=data_dir.resolve(),
        limits=limits,
        index=index,
        logging=logging_config,
    )


def load_effective_config(
    workspace_root: Path,
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load config using merge order defaults -> file -> environment -> overrides."""
    resolved_root = workspace_root.resolve()
    base = default_config(resolved_root)
    merged = merge_config(base, load_workspace_config_file(resolved_root))
    merged = apply_environment(merged, os.environ if environ is None else environ)
    return apply_cli_overrides(merged, overrides or CliOverrides())


def _merge_limits(
    limits: SecurityLimits,
    *,
    prefix: str,
    max_file_bytes: object = None,
    max_read_lines: object = None,
    max_find_results: object = None,
    max_total_bytes_per_response: object = None,
) -> SecurityLimits:
    return SecurityLimits(
        max_file_bytes=_optional_positive_int_with_cap(
            max_file_bytes,
            f"{prefix}.max_file_bytes",
            limits.max_file_bytes,
            MAX_FILE_BYTES_CAP,
        ),
        max_read_lines=_optional_positive_int_with_cap(
            max_read_lines,
            f"{prefix}.max_read_lines",
            limits.max_read_lines,
            MAX_READ_LINES_CAP,
        ),
        max_find_results=_optional_positive_int_with_cap(
            max_find_results,
            f"{prefix}.max_find_results",
            limits.max_find_results,
            MAX_FIND_RESULTS_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            max_total_bytes_per_response,
            f"{prefix}.max_total_bytes_per_response",
            limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
    )


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
