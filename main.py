"""Main application entry point."""

import uvicorn

from src.config.environment import IS_PRODUCTION_ENVIRONMENT
from src.config.settings import HOST, PORT

# Factory reference, so every worker builds its own app and database pool
APP_FACTORY = "src.api.app:create_application"

if __name__ == "__main__":
    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - hot-reload and verbose logs
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=HOST,
            port=PORT,
            reload=True,
            log_level="debug"
        )
    else:
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=HOST,
            port=PORT,
            reload=False,
            workers=4,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
