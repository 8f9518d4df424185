"""Environment configuration module.

Import this before any other project module that reads environment
variables: it loads .env (python-dotenv) so that settings, the database
config and the maintenance scripts all see the same values.

Usage:
    from src.config.environment import ENVIRONMENT, IS_PRODUCTION_ENVIRONMENT
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

KNOWN_ENVIRONMENTS = ('development', 'production')
DEFAULT_ENVIRONMENT = 'development'

def resolve_environment(raw: str) -> str:
    """Normalize an ENVIRONMENT value, falling back to development."""
    name = (raw or '').strip().lower()
    if name not in KNOWN_ENVIRONMENTS:
        logging.warning(
            f"ENVIRONMENT '{raw}' is not one of {', '.join(KNOWN_ENVIRONMENTS)}; "
            f"running the event API in {DEFAULT_ENVIRONMENT} mode."
        )
        return DEFAULT_ENVIRONMENT
    return name

ENVIRONMENT = resolve_environment(os.environ.get('ENVIRONMENT', ''))
IS_PRODUCTION_ENVIRONMENT = ENVIRONMENT == 'production'

__all__ = ['ENVIRONMENT', 'IS_PRODUCTION_ENVIRONMENT', 'resolve_environment']
