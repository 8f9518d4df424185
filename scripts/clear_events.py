#!/usr/bin/env python3

import logging
import sys
from pathlib import Path

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from src.config.environment import IS_PRODUCTION_ENVIRONMENT
from src.db import Database, EventStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def clear_all_events():
    """Clear all events from the database"""
    if IS_PRODUCTION_ENVIRONMENT:
        confirm = input("This deletes every event in PRODUCTION. Type 'yes' to continue: ")
        if confirm.strip().lower() != 'yes':
            logger.info("Aborted")
            return

    database = Database()
    database.connect()
    try:
        count = EventStore(database).delete_all()
        logger.info(f"Cleared {count} events from database")
    finally:
        database.dispose()

if __name__ == "__main__":
    clear_all_events()
