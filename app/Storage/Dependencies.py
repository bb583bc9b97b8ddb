from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, HTTPException
from pydantic import BaseModel, Field

from .Attributes import FileAttributes
from .FilesystemAdapter import FilesystemAdapter
from .StorageFacade import Storage


class StoredFile(BaseModel):
    """Response model describing a stored file."""

    path: str
    mimetype: str = Field("text/plain", description="Detected MIME type")
    size: Optional[int] = None
    timestamp: Optional[int] = Field(None, description="Creation time as a Unix timestamp")
    etag: Optional[str] = None
    version: Optional[int] = None
    visibility: str = "private"

    @classmethod
    def from_attributes(cls, attributes: FileAttributes) -> StoredFile:
        data = attributes.to_dict()
        return cls(
            path=data['path'],
            mimetype=data['mimetype'],
            size=data['size'],
            timestamp=data['timestamp'],
            etag=data['etag'],
            version=data['version'],
            visibility=data['visibility'],
        )


# Storage Dependencies

def get_storage_disk(disk_name: str = "cloudinary") -> FilesystemAdapter:
    """Get a storage disk instance."""
    try:
        return Storage.disk(disk_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_default_storage() -> FilesystemAdapter:
    """Get the default storage disk."""
    return Storage.disk()


def validate_file_path(path: str) -> str:
    """Reject paths that try to leave the disk namespace."""
    if not path.strip('/') or '..' in path.split('/'):
        raise HTTPException(status_code=400, detail="Invalid file path")
    return path.strip('/')


# Type annotations for route signatures
StorageDisk = Annotated[FilesystemAdapter, Depends(get_default_storage)]
NamedStorageDisk = Annotated[FilesystemAdapter, Depends(get_storage_disk)]
ValidatedPath = Annotated[str, Depends(validate_file_path)]
