"""
Postboard — Process Entry Point
=================================

`python -m postboard` or the `postboard` console script.

Startup order:
    1. Load settings; missing DATABASE_URL / PORT / JWT_SECRET_KEY exits 1
    2. Build the application
    3. Hand it to uvicorn, whose lifespan startup pings the database before
       the socket is bound
"""

import uvicorn

from postboard.config import load_settings
from postboard.main import create_app, setup_logging


def run() -> None:
    setup_logging()
    settings = load_settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    run()
