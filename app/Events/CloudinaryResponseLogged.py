from __future__ import annotations

from typing import Any, Dict

from .Event import Event


class CloudinaryResponseLogged(Event):
    """Event fired with the raw response of every successful Cloudinary call."""

    def __init__(self, response: Dict[str, Any]) -> None:
        super().__init__()
        self.response = response

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event_id,
            'timestamp': self.timestamp.isoformat(),
            'event': 'cloudinary.response',
            'response': self.response,
        }
