from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from app.Events.Event import EventDispatcher, get_event_dispatcher
from app.Support.Config import config

from .CloudinaryAdapter import CloudinaryAdapter, CloudinaryConfig
from .CloudinaryClient import CloudinaryApiClient, MediaApiClient
from .FilesystemAdapter import FilesystemAdapter

DriverFactory = Callable[[Dict[str, Any]], FilesystemAdapter]


def create_cloudinary_driver(disk_config: Dict[str, Any], events: Optional[EventDispatcher] = None) -> CloudinaryAdapter:
    """Build a Cloudinary disk from its ``filesystems.disks`` entry."""
    client = CloudinaryApiClient(
        cloud_name=disk_config.get('cloud_name'),
        api_key=disk_config.get('api_key'),
        api_secret=disk_config.get('api_secret'),
        url=disk_config.get('url'),
        timeout=disk_config.get('timeout'),
    )

    return CloudinaryAdapter(
        client,
        CloudinaryConfig(
            folder=disk_config.get('folder'),
            upload_preset=disk_config.get('upload_preset'),
            secure_url=bool(disk_config.get('secure_url', True)),
            fetch_timeout=int(disk_config.get('fetch_timeout', 30)),
        ),
        events=events or get_event_dispatcher(),
    )


class StorageManager:
    """Laravel-style storage manager resolving disks from configuration."""

    def __init__(self, disks: Optional[Dict[str, Dict[str, Any]]] = None, default_disk: Optional[str] = None) -> None:
        self.disk_configs = disks if disks is not None else config.get('filesystems.disks', {})
        self.default_disk = default_disk or config.get('filesystems.default', 'cloudinary')
        self.disks: Dict[str, FilesystemAdapter] = {}
        self.drivers: Dict[str, DriverFactory] = {
            'cloudinary': create_cloudinary_driver,
        }
        self.logger = logging.getLogger(self.__class__.__name__)

    def disk(self, name: Optional[str] = None) -> FilesystemAdapter:
        """Get a filesystem disk, building it on first use."""
        disk_name = name or self.default_disk

        if disk_name not in self.disks:
            self.disks[disk_name] = self._resolve(disk_name)

        return self.disks[disk_name]

    def _resolve(self, name: str) -> FilesystemAdapter:
        disk_config = self.disk_configs.get(name)
        if disk_config is None:
            raise ValueError(f"Disk '{name}' not found")

        driver = disk_config.get('driver')
        factory = self.drivers.get(driver)
        if factory is None:
            raise ValueError(f"Driver '{driver}' is not supported for disk '{name}'")

        self.logger.debug(f"Creating '{name}' disk with the {driver} driver")
        return factory(disk_config)

    def extend(self, name: str, adapter: FilesystemAdapter) -> None:
        """Register a prebuilt filesystem adapter."""
        self.disks[name] = adapter

    def register_driver(self, driver: str, factory: DriverFactory) -> None:
        """Register a factory for a custom driver."""
        self.drivers[driver] = factory

    def forget_disk(self, name: str) -> None:
        """Drop a resolved disk so the next lookup rebuilds it."""
        self.disks.pop(name, None)

    def get_disk_names(self) -> List[str]:
        return list(self.disk_configs.keys())


class Storage:
    """
    Laravel-style Storage facade.

    Calls are forwarded to a lazily created StorageManager; ``fake`` swaps a
    disk for a Cloudinary adapter over a caller supplied client.
    """

    _manager: Optional[StorageManager] = None

    @classmethod
    def _get_manager(cls) -> StorageManager:
        if cls._manager is None:
            cls._manager = StorageManager()
        return cls._manager

    @classmethod
    def set_manager(cls, manager: Optional[StorageManager]) -> None:
        cls._manager = manager

    @classmethod
    def disk(cls, name: Optional[str] = None) -> FilesystemAdapter:
        """Get a storage disk instance."""
        return cls._get_manager().disk(name)

    @classmethod
    def extend(cls, name: str, adapter: FilesystemAdapter) -> None:
        """Register a custom storage adapter."""
        cls._get_manager().extend(name, adapter)

    @classmethod
    def forget_disk(cls, name: str) -> None:
        cls._get_manager().forget_disk(name)

    @classmethod
    def fake(
        cls,
        client: MediaApiClient,
        name: Optional[str] = None,
        events: Optional[EventDispatcher] = None,
        **options: Any,
    ) -> CloudinaryAdapter:
        """Replace a disk with an adapter talking to the given client."""
        manager = cls._get_manager()
        disk_name = name or manager.default_disk
        adapter = CloudinaryAdapter(client, CloudinaryConfig(**options), events=events)
        manager.extend(disk_name, adapter)

        return adapter

    # Proxies to the default disk

    @classmethod
    def exists(cls, path: str) -> bool:
        return cls.disk().file_exists(path)

    @classmethod
    def missing(cls, path: str) -> bool:
        return cls.disk().missing(path)

    @classmethod
    def get(cls, path: str) -> bytes:
        return cls.disk().read(path)

    @classmethod
    def put(cls, path: str, contents: Any) -> bool:
        return cls.disk().write(path, contents) is not None

    @classmethod
    def delete(cls, path: str) -> bool:
        return cls.disk().delete(path)

    @classmethod
    def copy(cls, from_path: str, to_path: str) -> bool:
        return cls.disk().copy(from_path, to_path)

    @classmethod
    def move(cls, from_path: str, to_path: str) -> None:
        cls.disk().move(from_path, to_path)

    @classmethod
    def url(cls, path: str) -> Optional[str]:
        disk = cls.disk()
        if isinstance(disk, CloudinaryAdapter):
            return disk.get_url(path)
        return None


def storage_disk(name: Optional[str] = None) -> FilesystemAdapter:
    """Get a storage disk."""
    return Storage.disk(name)
