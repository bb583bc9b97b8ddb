from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, Optional


class StorageType(str, Enum):
    """Kind of entry returned by a disk."""
    FILE = 'file'
    DIRECTORY = 'dir'


class Visibility(str, Enum):
    """File visibility."""
    PUBLIC = 'public'
    PRIVATE = 'private'


class ResourceType(str, Enum):
    """Cloudinary resource categories."""
    IMAGE = 'image'
    RAW = 'raw'
    VIDEO = 'video'
    AUTO = 'auto'


# Order used whenever the category of a stored path is unknown.
PROBE_ORDER = (ResourceType.IMAGE, ResourceType.RAW, ResourceType.VIDEO)


@dataclass
class FileAttributes:
    """Normalized metadata for a stored file."""

    path: str
    contents: Optional[bytes] = None
    mime_type: str = 'text/plain'
    size: Optional[int] = None
    last_modified: Optional[int] = None
    etag: Optional[str] = None
    version: Optional[Any] = None
    version_id: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    stream: Optional[BinaryIO] = None
    type: StorageType = StorageType.FILE

    def is_file(self) -> bool:
        return True

    def is_dir(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the flat attribute mapping used by filesystem consumers."""
        result: Dict[str, Any] = {
            'contents': self.contents,
            'etag': self.etag,
            'mimetype': self.mime_type,
            'path': self.path,
            'size': self.size,
            'timestamp': self.last_modified,
            'type': self.type.value,
            'version': self.version,
            'versionid': self.version_id,
            'visibility': self.visibility.value,
        }

        if self.stream is not None:
            result['stream'] = self.stream

        return result


@dataclass
class DirectoryAttributes:
    """A folder entry."""

    path: str
    name: str = ''
    type: StorageType = StorageType.DIRECTORY

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.path.rsplit('/', 1)[-1]

    def is_file(self) -> bool:
        return False

    def is_dir(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'path': self.path,
            'name': self.name,
        }
