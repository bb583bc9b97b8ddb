from __future__ import annotations

from typing import Any, BinaryIO, Dict, List, Optional, Union
from abc import ABC, abstractmethod

from .Attributes import DirectoryAttributes, FileAttributes

StorageAttributes = Union[FileAttributes, DirectoryAttributes]


class FilesystemAdapter(ABC):
    """Abstract filesystem adapter following the Flysystem adapter interface.

    ``config`` arguments carry per-call write options; adapters may ignore them.
    """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if a file exists."""
        pass

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """Check if a directory exists."""
        pass

    @abstractmethod
    def write(self, path: str, contents: Union[str, bytes], config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        """Store file contents."""
        pass

    @abstractmethod
    def write_stream(self, path: str, resource: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        """Store the contents of a stream."""
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Get file contents."""
        pass

    @abstractmethod
    def read_stream(self, path: str) -> Optional[FileAttributes]:
        """Get file metadata with a readable stream attached."""
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Delete a file."""
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> bool:
        """Delete a directory."""
        pass

    @abstractmethod
    def create_directory(self, path: str, config: Optional[Dict[str, Any]] = None) -> bool:
        """Create a directory."""
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> None:
        pass

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = False) -> List[StorageAttributes]:
        """List files and directories in a directory."""
        pass

    @abstractmethod
    def move(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        """Move a file, raising UnableToMoveFile on failure."""
        pass

    @abstractmethod
    def copy(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> bool:
        """Copy a file."""
        pass

    def missing(self, path: str) -> bool:
        """Check if a file is missing."""
        return not self.file_exists(path)

    def get_string(self, path: str) -> Optional[str]:
        """Get file contents as string."""
        contents = self.read(path)
        return contents.decode('utf-8') if contents else None
