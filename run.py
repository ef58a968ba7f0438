#!/usr/bin/env python3
"""
Run the Property Wizard API.

Serves the step catalog and wizard sessions over HTTP. Settings come from
the environment (HOST, PORT, DEBUG, LOG_LEVEL, DATA_DIR, DEFAULT_ROLE).
"""

import uvicorn

from utils.config import Config


def main():
    """Start the web server."""
    config = Config.load()

    print(f"Property Wizard API on http://{config.host}:{config.port}/wizard")
    print(f"Records and drafts stored in {config.repository_path}")
    print(f"Requests without X-User-Role act as '{config.default_role}'")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
