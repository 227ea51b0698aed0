"""Source folder scanning."""

from mitey.ingesters.folder_scanner import FolderScanner

__all__ = ["FolderScanner"]
