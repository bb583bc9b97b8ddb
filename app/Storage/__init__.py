from .Attributes import (
    DirectoryAttributes, FileAttributes, ResourceType, StorageType, Visibility, PROBE_ORDER
)
from .Exceptions import (
    FilesystemException, CloudinaryError, NotFound, BadRequest, RateLimited, ApiError,
    UnableToMoveFile
)
from .PathPrefixer import PathPrefixer
from .MimeTypeDetector import MimeTypeDetector
from .FilesystemAdapter import FilesystemAdapter, StorageAttributes
from .CloudinaryClient import MediaApiClient, CloudinaryApiClient
from .CloudinaryAdapter import CloudinaryAdapter, CloudinaryConfig
from .StorageFacade import Storage, StorageManager, create_cloudinary_driver, storage_disk
from .Dependencies import (
    StoredFile, get_storage_disk, get_default_storage, validate_file_path,
    StorageDisk, NamedStorageDisk, ValidatedPath
)

__all__ = [
    # Records
    "DirectoryAttributes",
    "FileAttributes",
    "ResourceType",
    "StorageType",
    "Visibility",
    "PROBE_ORDER",

    # Errors
    "FilesystemException",
    "CloudinaryError",
    "NotFound",
    "BadRequest",
    "RateLimited",
    "ApiError",
    "UnableToMoveFile",

    # Adapters
    "PathPrefixer",
    "MimeTypeDetector",
    "FilesystemAdapter",
    "StorageAttributes",
    "MediaApiClient",
    "CloudinaryApiClient",
    "CloudinaryAdapter",
    "CloudinaryConfig",

    # Storage facade
    "Storage",
    "StorageManager",
    "create_cloudinary_driver",
    "storage_disk",

    # Dependencies
    "StoredFile",
    "get_storage_disk",
    "get_default_storage",
    "validate_file_path",
    "StorageDisk",
    "NamedStorageDisk",
    "ValidatedPath",
]
