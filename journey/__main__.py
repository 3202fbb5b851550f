"""
Run the Journey API with uvicorn: `python -m journey`.

In-flight requests get `shutdown_grace_period` seconds to finish on SIGTERM
before uvicorn closes their connections; the lifespan then drains detached
email tasks and disposes the pool.
"""

import uvicorn

from journey.config import settings


def main() -> None:
    uvicorn.run(
        "journey.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=int(settings.shutdown_grace_period),
    )


if __name__ == "__main__":
    main()
