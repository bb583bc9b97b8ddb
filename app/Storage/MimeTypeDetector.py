from __future__ import annotations

import mimetypes
from typing import Optional, Union

import magic


class MimeTypeDetector:
    """Detects MIME types from file contents, falling back to the extension."""

    # libmagic answers these when it cannot tell; the extension is more useful then
    INCONCLUSIVE_MIME_TYPES = (
        'application/x-empty',
        'text/plain',
        'text/x-asm',
        'application/octet-stream',
        'inode/x-empty',
    )

    BUFFER_SAMPLE_SIZE = 8192

    def detect_mime_type(self, path: str, contents: Optional[Union[str, bytes]] = None) -> Optional[str]:
        """Detect the MIME type of a file."""
        if contents is None:
            return self.detect_mime_type_from_path(path)

        if isinstance(contents, str):
            contents = contents.encode('utf-8')

        mime_type = self.detect_mime_type_from_buffer(contents)

        if mime_type is None or mime_type in self.INCONCLUSIVE_MIME_TYPES:
            return self.detect_mime_type_from_path(path) or mime_type

        return mime_type

    def detect_mime_type_from_path(self, path: str) -> Optional[str]:
        mime_type, _ = mimetypes.guess_type(path)
        return mime_type

    def detect_mime_type_from_buffer(self, contents: bytes) -> Optional[str]:
        if not contents:
            return None

        try:
            return magic.from_buffer(contents[:self.BUFFER_SAMPLE_SIZE], mime=True) or None
        except magic.MagicException:
            return None
