"""CORS configuration for the FastAPI application."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT

# Comma separated list of allowed origins in production
_PRODUCTION_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('CORS_ALLOWED_ORIGINS', '').split(',')
    if origin.strip()
]

ALLOWED_ORIGINS = {
    False: ["*"],                # Development - allow all
    True: _PRODUCTION_ORIGINS,   # Production - restricted
}

ALLOWED_METHODS = [
    "GET",      # Fetching and listing events
    "POST",     # Creating events
    "PUT",      # Updating events
    "DELETE",   # Deleting events
    "OPTIONS"   # Required for CORS preflight
]

ALLOWED_HEADERS = [
    "Content-Type",   # JSON, urlencoded and multipart bodies
    "Accept",         # For content negotiation
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 3600,
}
