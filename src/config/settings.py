"""Application settings for the event API.

Values are read from the environment once, at import time. Import
``src.config.environment`` first so that .env has been loaded.
"""

import os
from pathlib import Path

from .environment import IS_PRODUCTION_ENVIRONMENT

# Every event route is mounted under this prefix
API_PREFIX = os.environ.get('API_PREFIX', '/api/v3/app').rstrip('/')

# Directory where uploaded event images are written
UPLOAD_DIR = Path(os.environ.get('UPLOAD_DIR', 'uploads'))

# Reported by the health check and the OpenAPI docs
APP_VERSION = '1.0.0'

# Pagination defaults for the event listing
DEFAULT_PAGE_LIMIT = 5
DEFAULT_PAGE = 1

# Server binding, used by main.py
HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', '3000'))

__all__ = [
    'IS_PRODUCTION_ENVIRONMENT',
    'APP_VERSION',
    'API_PREFIX',
    'UPLOAD_DIR',
    'DEFAULT_PAGE_LIMIT',
    'DEFAULT_PAGE',
    'HOST',
    'PORT',
]
