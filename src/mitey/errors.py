"""Exception types raised by Mitey."""


class MiteyError(Exception):
    """Base exception for all Mitey errors."""

    pass


class ConfigError(MiteyError):
    """Raised when configuration validation fails."""

    pass


class ScanIOError(MiteyError):
    """Raised when a file or directory cannot be read during a scan."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class EmbeddingUnavailable(MiteyError):
    """Raised when the embedding model cannot be loaded or reached."""

    pass


class IndexNotFound(MiteyError):
    """Raised when no index exists at the configured path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No index found at {path}. Run `mitey scan` first.")


class IndexCorrupt(MiteyError):
    """Raised when a stored index cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Index at {path} is unreadable ({reason}). Run `mitey scan` to rebuild it.")


class ModelUnavailable(MiteyError):
    """Raised when the chat model cannot be reached or refuses the request."""

    pass


class SourceUnavailable(MiteyError):
    """Raised when a file named in a question can no longer be read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read {source}: {reason}")
