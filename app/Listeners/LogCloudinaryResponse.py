from __future__ import annotations

from typing import Any

from app.Events.CloudinaryResponseLogged import CloudinaryResponseLogged
from app.Events.Event import Event, EventListener
from app.Log.LogManager import logger
from app.Support.Config import config


class LogCloudinaryResponse(EventListener):
    """Writes raw Cloudinary responses to the configured log channel."""

    def __init__(self) -> None:
        super().__init__()
        self.enabled = config.get('filesystems.disks.cloudinary.log_responses', True)
        self.channel = config.get('filesystems.disks.cloudinary.log_channel', 'cloudinary')

    def handle(self, event: Event) -> Any:
        if not self.enabled or not isinstance(event, CloudinaryResponseLogged):
            return None

        logger(self.channel).debug('Cloudinary response', {'response': event.response})
        return True
