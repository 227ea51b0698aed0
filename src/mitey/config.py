"""Configuration for Mitey.

Settings are an immutable value built once (from defaults, ``MITEY_*``
environment variables and explicit overrides) and passed to every component.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

from mitey.errors import ConfigError

DEFAULT_EXTENSIONS = (".tsx", ".ts", ".js", ".jsx", ".md", ".py")

DEFAULT_IGNORE_DIRS = (
    "__pycache__",
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    "venv",
    ".venv",
    "dist",
    "build",
    ".tox",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
)

ENV_PREFIX = "MITEY_"


@dataclass(frozen=True)
class Settings:
    """Everything a scan or a chat session needs to know."""

    embedding_model: str = "all-MiniLM-L6-v2"
    chat_model: str = "ollama/qwen2.5-coder:7b"
    temperature: float = 0.0
    api_base: str | None = "http://127.0.0.1:11434"
    num_ctx: int | None = 8192
    repeat_penalty: float | None = 1.1
    max_tokens: int | None = None
    index_path: Path = Path("local_index.mitey")
    source_root: Path = Path(".")
    project_root: Path = field(default_factory=Path.cwd)
    chunk_size: int = 800
    chunk_overlap: int = 100
    retrieval_k: int = 6
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore_dirs: tuple[str, ...] = DEFAULT_IGNORE_DIRS
    scan_concurrency: int = 16

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ConfigError(
                f"chunk_overlap must be in [0, chunk_size), got {self.chunk_overlap} "
                f"with chunk_size {self.chunk_size}"
            )
        if self.retrieval_k < 1:
            raise ConfigError(f"retrieval_k must be at least 1, got {self.retrieval_k}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ConfigError(f"temperature must be between 0 and 2, got {self.temperature}")
        if self.num_ctx is not None and self.num_ctx < 1:
            raise ConfigError(f"num_ctx must be at least 1, got {self.num_ctx}")
        if self.repeat_penalty is not None and self.repeat_penalty <= 0:
            raise ConfigError(f"repeat_penalty must be positive, got {self.repeat_penalty}")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ConfigError(f"max_tokens must be at least 1, got {self.max_tokens}")
        if self.scan_concurrency < 1:
            raise ConfigError(f"scan_concurrency must be at least 1, got {self.scan_concurrency}")
        if not self.extensions:
            raise ConfigError("extensions must not be empty")


def _parse_extensions(value: str) -> tuple[str, ...]:
    exts = []
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        exts.append(item if item.startswith(".") else f".{item}")
    return tuple(exts)


def _parse_names(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _optional_str(value: str) -> str | None:
    return value or None


def _optional_int(value: str) -> int | None:
    return int(value) if value else None


def _optional_float(value: str) -> float | None:
    return float(value) if value else None


# field name -> parser for the matching MITEY_<NAME> environment variable
_ENV_PARSERS: dict[str, Callable[[str], Any]] = {
    "embedding_model": str,
    "chat_model": str,
    "temperature": float,
    "api_base": _optional_str,
    "num_ctx": _optional_int,
    "repeat_penalty": _optional_float,
    "max_tokens": _optional_int,
    "index_path": Path,
    "source_root": Path,
    "project_root": Path,
    "chunk_size": int,
    "chunk_overlap": int,
    "retrieval_k": int,
    "extensions": _parse_extensions,
    "ignore_dirs": _parse_names,
    "scan_concurrency": int,
}


def _read_env(environ: dict[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, parser in _ENV_PARSERS.items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        try:
            values[name] = parser(raw.strip())
        except ValueError as e:
            raise ConfigError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return values


def load_settings(environ: dict[str, str] | None = None, **overrides: Any) -> Settings:
    """Build settings from environment variables and explicit overrides.

    Overrides whose value is None are ignored, so CLI flags that were not
    given fall through to the environment and then to the defaults.

    Args:
        environ: Environment mapping (defaults to ``os.environ``).
        **overrides: Field values that take precedence over the environment.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If a value is malformed or out of range.
    """
    known = {f.name for f in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    values = _read_env(dict(os.environ) if environ is None else environ)
    values.update({k: v for k, v in overrides.items() if v is not None})

    for name in ("index_path", "source_root", "project_root"):
        if name in values:
            values[name] = Path(values[name])
    if "extensions" in values:
        values["extensions"] = tuple(e.lower() for e in values["extensions"])

    return Settings(**values)
