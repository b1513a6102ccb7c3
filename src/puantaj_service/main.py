"""Entry point - starts the REST server."""

import asyncio

import structlog
import uvicorn

from puantaj_service.logging_config import configure_logging
from puantaj_service.rest.app import create_app
from puantaj_service.settings import settings

logger = structlog.get_logger()


async def main() -> None:
    configure_logging(settings.log_level, settings.log_format)

    app = create_app()
    config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=settings.rest_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    logger.info(
        "starting_service",
        rest_port=settings.rest_port,
        environment=settings.environment,
        session_backend=settings.session_backend,
    )
    await server.serve()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
