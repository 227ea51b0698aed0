"""Mitey - small, but mighty question answering over a local source tree.

Index a folder once, then ask questions about it. Questions that name a file
get that whole file as context; everything else goes through semantic search
over the indexed chunks.
"""

from mitey.config import Settings, load_settings
from mitey.conversation import ChatSession, build_prompt
from mitey.errors import (
    ConfigError,
    EmbeddingUnavailable,
    IndexCorrupt,
    IndexNotFound,
    MiteyError,
    ModelUnavailable,
    ScanIOError,
    SourceUnavailable,
)
from mitey.pipeline import index_directory

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "ChatSession",
    "build_prompt",
    "index_directory",
    "MiteyError",
    "ConfigError",
    "ScanIOError",
    "EmbeddingUnavailable",
    "IndexNotFound",
    "IndexCorrupt",
    "ModelUnavailable",
    "SourceUnavailable",
]
