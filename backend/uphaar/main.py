"""
Uphaar Backend: Server Entry Point
==================================

What:  The module uvicorn serves (uvicorn uphaar.main:app) and the
       `uphaar-server` console script.
How:   app is created at import with no context; its lifespan builds the
       AppContext from settings on startup.
"""

import uvicorn

from uphaar.adapters.server import create_app
from uphaar.config import settings

app = create_app()


def run() -> None:
    """Serve app on the configured host and port."""
    uvicorn.run(
        "uphaar.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
