"""``edgebin run``: serve the diagnostic API with pounce."""

import logging

from edgebin.config import AppConfig
from edgebin.routes import create_app

logger = logging.getLogger("edgebin.cli")


def run_server(config: AppConfig) -> None:
    """Assemble the app from *config* and serve it until interrupted."""
    app = create_app(config)
    mode = "strict API" if config.strict_api else "API + assets"
    logger.info("Starting edgebin (%s, %d routes)", mode, len(app.routes))
    app.run()
