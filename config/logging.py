from __future__ import annotations

from typing import Dict, Any

from app.Support.Config import env

# Default log channel
default = env('LOG_CHANNEL', 'stderr')

channels: Dict[str, Dict[str, Any]] = {
    'stack': {
        'driver': 'stack',
        'channels': ['single', 'stderr'],
    },

    'single': {
        'driver': 'single',
        'path': 'storage/logs/storage.log',
        'level': env('LOG_LEVEL', 'debug'),
    },

    'daily': {
        'driver': 'daily',
        'path': 'storage/logs/storage.log',
        'level': env('LOG_LEVEL', 'debug'),
        'days': 14,
    },

    'stderr': {
        'driver': 'stderr',
        'level': env('LOG_LEVEL', 'info'),
        'formatter': 'laravel',
    },

    # Raw Cloudinary API responses, one JSON document per line
    'cloudinary': {
        'driver': env('CLOUDINARY_LOG_DRIVER', 'stderr'),
        'path': 'storage/logs/cloudinary.log',
        'level': env('CLOUDINARY_LOG_LEVEL', 'debug'),
        'formatter': 'json',
    },

    'null': {
        'driver': 'null',
    },
}
