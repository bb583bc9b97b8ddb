from __future__ import annotations

from typing import Any, Dict, Iterator
from unittest.mock import MagicMock

import pytest

from app.Events.Event import EventFake
from app.Storage.CloudinaryAdapter import CloudinaryAdapter, CloudinaryConfig
from app.Storage.CloudinaryClient import MediaApiClient
from app.Storage.StorageFacade import Storage


@pytest.fixture
def client() -> MagicMock:
    """Stand-in for the Cloudinary API."""
    return MagicMock(spec=MediaApiClient)


@pytest.fixture
def events() -> EventFake:
    return EventFake()


@pytest.fixture
def adapter(client: MagicMock, events: EventFake) -> CloudinaryAdapter:
    """Adapter namespaced under the ``uploads`` folder."""
    return CloudinaryAdapter(client, CloudinaryConfig(folder='uploads'), events=events)


@pytest.fixture
def http_response() -> Any:
    """Build a fake requests.Response carrying the given body."""
    def make(content: bytes) -> MagicMock:
        response = MagicMock()
        response.content = content
        response.raise_for_status.return_value = None
        return response

    return make


@pytest.fixture
def asset() -> Dict[str, Any]:
    """A typical explicit/upload response."""
    return {
        'public_id': 'uploads/docs/report.txt',
        'resource_type': 'raw',
        'type': 'upload',
        'bytes': 5,
        'created_at': '2024-01-02T03:04:05Z',
        'etag': 'd41d8cd98f00b204e9800998ecf8427e',
        'version': 1704164645,
        'access_mode': 'public',
        'url': 'http://res.cloudinary.com/demo/raw/upload/v1/uploads/docs/report.txt',
        'secure_url': 'https://res.cloudinary.com/demo/raw/upload/v1/uploads/docs/report.txt',
    }


@pytest.fixture(autouse=True)
def reset_storage_manager() -> Iterator[None]:
    yield
    Storage.set_manager(None)
