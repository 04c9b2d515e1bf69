#!/usr/bin/env python3
"""Run the Participa API server."""

import logging
import logging.handlers
import sys
from pathlib import Path

# Add project to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from participa.config import get, load_config
from participa.db import init_db

logger = logging.getLogger(__name__)


def setup_logging():
    """Log to stderr, and to a daily rotating file when logging.file is set."""
    log_level = get("logging.level", "INFO")
    handlers = [logging.StreamHandler()]

    log_file = get("logging.file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when='midnight',
            interval=1,
            backupCount=7
        )
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def main():
    """Run the API server."""
    config_path = project_root / "config" / "config.yaml"
    if not config_path.exists():
        print("Error: config/config.yaml not found")
        print("Copy config/config.example.yaml to config/config.yaml and configure it")
        sys.exit(1)

    load_config(str(config_path))
    setup_logging()

    init_db(get("database.path"))

    host = get("api.host", "127.0.0.1")
    port = get("api.port", 8000)

    logger.info(f"Starting Participa API on {host}:{port}")
    logger.info(f"  - Swagger UI: http://{host}:{port}/docs")

    # Import here so components load after logging is configured
    import uvicorn
    from participa.api import create_app

    app = create_app(str(project_root / get("components.config", "components_config.yaml")))

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
