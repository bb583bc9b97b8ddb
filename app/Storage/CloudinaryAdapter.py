from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, BinaryIO, Dict, List, Optional, Union

import requests

from app.Events.CloudinaryResponseLogged import CloudinaryResponseLogged
from app.Events.Event import EventDispatcher, get_event_dispatcher

from .Attributes import PROBE_ORDER, DirectoryAttributes, FileAttributes, ResourceType, Visibility
from .CloudinaryClient import MediaApiClient
from .Exceptions import CloudinaryError, NotFound, UnableToMoveFile
from .FilesystemAdapter import FilesystemAdapter, StorageAttributes
from .MimeTypeDetector import MimeTypeDetector
from .PathPrefixer import PathPrefixer


@dataclass(frozen=True)
class CloudinaryConfig:
    """Settings of a Cloudinary disk."""

    folder: Optional[str] = None
    upload_preset: Optional[str] = None
    secure_url: bool = True
    fetch_timeout: int = 30


class CloudinaryAdapter(FilesystemAdapter):
    """
    Filesystem adapter storing files as Cloudinary assets.

    Paths are qualified with the configured folder before they reach the API
    and unqualified again in every returned record. Cloudinary keeps images,
    videos and raw files apart, so lookups that do not know a path's resource
    type probe image, raw and video in that order.

    Most operations report failure with a falsy return value instead of
    raising; ``move`` is the exception and raises ``UnableToMoveFile``.
    """

    LIST_MAX_RESULTS = 500
    SUBFOLDER_PAGE_SIZE = 4
    SPOOL_MAX_SIZE = 16 * 1024 * 1024
    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        client: MediaApiClient,
        config: Optional[CloudinaryConfig] = None,
        events: Optional[EventDispatcher] = None,
        mime_type_detector: Optional[MimeTypeDetector] = None,
    ) -> None:
        self.client = client
        self.config = config or CloudinaryConfig()
        self.events = events if events is not None else get_event_dispatcher()
        self.mime_type_detector = mime_type_detector or MimeTypeDetector()
        self.prefixer = PathPrefixer(self.config.folder)
        self.logger = logging.getLogger(self.__class__.__name__)

    # Writing

    def write(self, path: str, contents: Union[str, bytes], config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        return self._upload(path, contents)

    def write_stream(self, path: str, resource: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        return self._upload(path, resource)

    def update(self, path: str, contents: Union[str, bytes], config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        return self._upload(path, contents)

    def update_stream(self, path: str, resource: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[FileAttributes]:
        return self._upload(path, resource)

    def _upload(self, path: str, body: Union[str, bytes, BinaryIO]) -> Optional[FileAttributes]:
        """Upload an object, letting Cloudinary pick the resource type.

        Returns None when the API rejects the upload.
        """
        if isinstance(body, str):
            body = body.encode('utf-8')

        options: Dict[str, Any] = {
            'type': 'upload',
            'public_id': self.prefixer.qualify(path),
            'invalidate': True,
            'use_filename': True,
            'resource_type': ResourceType.AUTO.value,
            'unique_filename': False,
        }

        if self.config.folder:
            options['folder'] = self.config.folder

        if self.config.upload_preset:
            options['upload_preset'] = self.config.upload_preset

        with tempfile.SpooledTemporaryFile(max_size=self.SPOOL_MAX_SIZE) as buffer:
            if isinstance(body, (bytes, bytearray)):
                buffer.write(body)
            else:
                while True:
                    chunk = body.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    if isinstance(chunk, str):
                        chunk = chunk.encode('utf-8')
                    buffer.write(chunk)

            buffer.seek(0)
            sample = buffer.read(MimeTypeDetector.BUFFER_SAMPLE_SIZE)
            buffer.seek(0)

            try:
                response = self.client.upload(buffer, **options)
            except CloudinaryError as e:
                self.logger.warning(f"Upload of {options['public_id']} failed: {e}")
                return None

        self._log_response(response)

        contents = bytes(body) if isinstance(body, (bytes, bytearray)) else None
        return self._normalize_response(response, options['public_id'], contents, sample)

    # Renaming and copying

    def rename(self, path: str, newpath: str) -> bool:
        try:
            self._rename(path, newpath)
        except CloudinaryError as e:
            self.logger.info(f"Rename of {path} to {newpath} failed: {e}")
            return False

        return True

    def move(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        try:
            self._rename(source, destination)
        except NotFound as e:
            raise UnableToMoveFile.from_location_to(source, destination, e) from e

    def _rename(self, path: str, newpath: str) -> Dict[str, Any]:
        response = self.client.rename(
            self.prefixer.qualify(path),
            self.prefixer.qualify(newpath),
            invalidate=True,
        )

        self._log_response(response)
        return response

    def copy(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> bool:
        """Copy by downloading the source and uploading it again."""
        meta = self.read_object(self.prefixer.qualify(source))

        if meta is None or meta.contents is None:
            return False

        return self._upload(destination, meta.contents) is not None

    # Deleting

    def delete(self, path: str) -> bool:
        return self._destroy(self.prefixer.qualify(path))

    def _destroy(self, public_id: str) -> bool:
        for resource_type in PROBE_ORDER:
            try:
                response = self.client.destroy(public_id, resource_type=resource_type.value, invalidate=True)
            except CloudinaryError as e:
                self.logger.warning(f"Destroying {resource_type.value} {public_id} failed: {e}")
                continue

            self._log_response(response)

            if response.get('result') == 'ok':
                return True

        return False

    def delete_dir(self, dirname: str) -> bool:
        """Destroy the files directly inside a folder, then the folder itself.

        Files in nested folders are left alone; Cloudinary refuses to delete a
        folder that still holds assets, in which case this returns False.
        """
        directory = dirname.strip('/')

        # The listing matches by prefix, so it may also return docs2/ or nested files
        for entry in self.list_contents(dirname):
            if entry.is_file() and self.prefixer.parent(entry.path) == directory:
                self._destroy(self.prefixer.qualify(entry.path))

        try:
            response = self.client.delete_folder(self.prefixer.qualify(dirname))
        except CloudinaryError as e:
            self.logger.warning(f"Deleting folder {dirname} failed: {e}")
            return False

        self._log_response(response)
        return True

    def delete_directory(self, path: str) -> bool:
        return self.delete_dir(path)

    # Directories

    def create_dir(self, dirname: str, config: Optional[Dict[str, Any]] = None) -> Optional[DirectoryAttributes]:
        public_path = self.prefixer.qualify(dirname)

        try:
            response = self.client.create_folder(public_path)
        except CloudinaryError as e:
            self.logger.warning(f"Creating folder {dirname} failed: {e}")
            return None

        self._log_response(response)
        return DirectoryAttributes(path=self.prefixer.unqualify(public_path))

    def create_directory(self, path: str, config: Optional[Dict[str, Any]] = None) -> bool:
        return self.create_dir(path, config) is not None

    def directory_exists(self, path: str) -> bool:
        """Look for the folder among its parent's sub-folders, one page at a time."""
        public_path = self.prefixer.qualify(path)
        parent = self.prefixer.parent(public_path)

        folders: List[Dict[str, Any]] = []
        next_cursor: Optional[str] = None

        while True:
            options: Dict[str, Any] = {'max_results': self.SUBFOLDER_PAGE_SIZE}
            if next_cursor:
                options['next_cursor'] = next_cursor

            try:
                response = self.client.subfolders(parent, **options)
            except CloudinaryError as e:
                self.logger.info(f"Listing folders of '{parent}' failed: {e}")
                return False

            self._log_response(response)
            folders.extend(response.get('folders', []))

            next_cursor = response.get('next_cursor')
            if not next_cursor:
                break

        return any(folder.get('path') == public_path for folder in folders)

    # Reading

    def has(self, path: str) -> bool:
        try:
            self.explicit(self.prefixer.qualify(path))
        except CloudinaryError:
            return False

        return True

    def file_exists(self, path: str) -> bool:
        return self.has(path)

    def exists(self, path: str) -> bool:
        return self.has(path)

    def read(self, path: str) -> bytes:
        """Return the file contents, or empty bytes when they cannot be fetched."""
        meta = self.read_object(self.prefixer.qualify(path))

        if meta is None or meta.contents is None:
            return b""

        return meta.contents

    def read_stream(self, path: str) -> Optional[FileAttributes]:
        """Return the metadata with a rewound temporary stream instead of contents.

        The caller owns the stream and should close it.
        """
        meta = self.read_object(self.prefixer.qualify(path))

        if meta is None:
            return None

        stream = tempfile.SpooledTemporaryFile(max_size=self.SPOOL_MAX_SIZE)
        try:
            stream.write(meta.contents or b"")
            stream.seek(0)
        except OSError as e:
            stream.close()
            self.logger.warning(f"Buffering {path} failed: {e}")
            return None

        meta.contents = None
        meta.stream = stream  # type: ignore[assignment]

        return meta

    def read_object(self, public_id: str) -> Optional[FileAttributes]:
        """Resolve a qualified public id and download its contents."""
        try:
            response = self.explicit(public_id)
        except CloudinaryError as e:
            self.logger.info(f"Resolving {public_id} failed: {e}")
            return None

        url = response.get('secure_url') or response.get('url')

        try:
            http_response = requests.get(url, timeout=self.config.fetch_timeout)
            http_response.raise_for_status()
        except requests.RequestException as e:
            self.logger.warning(f"Downloading {public_id} from {url} failed: {e}")
            return None

        return self._normalize_response(response, public_id, http_response.content)

    def explicit(self, public_id: str) -> Dict[str, Any]:
        """Resolve an asset by trying each resource type in turn.

        Raises NotFound once image, raw and video have all been tried.
        """
        not_found: Optional[NotFound] = None

        for resource_type in PROBE_ORDER:
            try:
                response = self.client.explicit(public_id, type='upload', resource_type=resource_type.value)
            except NotFound as e:
                not_found = e
                continue

            self._log_response(response)
            return response

        raise not_found or NotFound(f"Resource not found - {public_id}")

    def list_contents(self, directory: str = "", recursive: bool = False) -> List[StorageAttributes]:
        """List files and sub-folders of a directory.

        Files come first grouped as raw, image, video, followed by folders.
        Only the first page of each resource type is read, and any API error
        yields an empty list.
        """
        public_path = self.prefixer.qualify(directory)

        options: Dict[str, Any] = {
            'type': 'upload',
            'prefix': public_path,
            'max_results': self.LIST_MAX_RESULTS,
        }

        try:
            raw_files = self.client.resources(resource_type=ResourceType.RAW.value, **options)
            image_files = self.client.resources(resource_type=ResourceType.IMAGE.value, **options)
            video_files = self.client.resources(resource_type=ResourceType.VIDEO.value, **options)
            directories = self.client.subfolders(public_path)
        except CloudinaryError as e:
            self.logger.warning(f"Listing '{directory}' failed: {e}")
            return []

        for response in (raw_files, image_files, video_files, directories):
            self._log_response(response)

        contents: List[StorageAttributes] = [
            self._normalize_response(resource, resource['public_id'])
            for response in (raw_files, image_files, video_files)
            for resource in response.get('resources', [])
        ]

        contents.extend(
            DirectoryAttributes(path=self.prefixer.unqualify(folder['path']), name=folder['name'])
            for folder in directories.get('folders', [])
        )

        return contents

    # Metadata

    def get_metadata(self, path: str) -> Optional[FileAttributes]:
        return self.read_object(self.prefixer.qualify(path))

    def get_size(self, path: str) -> Optional[FileAttributes]:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Optional[FileAttributes]:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Optional[FileAttributes]:
        return self.get_metadata(path)

    def get_url(self, path: str) -> Optional[str]:
        try:
            response = self.explicit(self.prefixer.qualify(path))
        except CloudinaryError:
            return None

        if self.config.secure_url:
            return response.get('secure_url')

        return response.get('url')

    # Not supported by this disk

    def set_visibility(self, path: str, visibility: str) -> None:
        raise NotImplementedError("Cloudinary disk does not support setting visibility")

    def visibility(self, path: str) -> FileAttributes:
        raise NotImplementedError("Cloudinary disk does not support reading visibility")

    def mime_type(self, path: str) -> FileAttributes:
        raise NotImplementedError("Use get_mimetype() on the Cloudinary disk")

    def last_modified(self, path: str) -> FileAttributes:
        raise NotImplementedError("Use get_timestamp() on the Cloudinary disk")

    def file_size(self, path: str) -> FileAttributes:
        raise NotImplementedError("Use get_size() on the Cloudinary disk")

    # Helpers

    def _log_response(self, response: Dict[str, Any]) -> None:
        try:
            self.events.dispatch(CloudinaryResponseLogged(response))
        except Exception as e:
            self.logger.warning(f"Dispatching Cloudinary response log failed: {e}")

    def _normalize_response(
        self,
        response: Dict[str, Any],
        path: str,
        contents: Optional[bytes] = None,
        sample: Optional[bytes] = None,
    ) -> FileAttributes:
        """Build FileAttributes from an upload, explicit or listing response."""
        path = self.prefixer.unqualify(path)

        return FileAttributes(
            path=path,
            contents=contents,
            mime_type=self._detect_mime_type(path, contents if contents is not None else sample, response.get('format')),
            size=response.get('bytes'),
            last_modified=self._parse_timestamp(response.get('created_at')),
            etag=response.get('etag'),
            version=response.get('version'),
            version_id=response.get('version_id'),
            visibility=Visibility.PUBLIC if response.get('access_mode') == 'public' else Visibility.PRIVATE,
        )

    def _detect_mime_type(self, path: str, contents: Optional[bytes], extension: Optional[str]) -> str:
        mime_type = self.mime_type_detector.detect_mime_type(path, contents)

        # Image and video public ids carry their extension in ``format``
        if mime_type is None and extension:
            mime_type = self.mime_type_detector.detect_mime_type_from_path(f"{path}.{extension}")

        return mime_type or 'text/plain'

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[int]:
        if not value:
            return None

        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)

        return int(parsed.timestamp())
