from __future__ import annotations

from typing import Optional


class PathPrefixer:
    """Maps logical disk paths to Cloudinary public ids under a folder namespace."""

    def __init__(self, folder: Optional[str] = None) -> None:
        self.folder = (folder or '').strip('/')

    def qualify(self, path: str) -> str:
        """Trim slashes and prepend the configured folder.

        Not idempotent: qualifying an already qualified path prefixes it twice.
        """
        path = path.strip('/')

        if self.folder:
            return f"{self.folder}/{path}"

        return path

    def unqualify(self, path: str) -> str:
        """Strip the configured folder from the front of a public id."""
        if not self.folder:
            return path

        prefix = f"{self.folder}/"
        if path.startswith(prefix):
            return path[len(prefix):]

        return path

    def parent(self, path: str) -> str:
        """Return everything before the last slash, or an empty string."""
        if '/' not in path:
            return ''
        return path[:path.rindex('/')]
