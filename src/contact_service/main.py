import sys
from contextlib import asynccontextmanager

from fastapi import (
    FastAPI,
)
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from contact_service.core import Cipher, ContactRepository, ContactService, FieldTransformer
from contact_service.routers import get_routers
from contact_service.shared import Config, ConfigurationError, Logger, load_config
from contact_service.shared.db import build_engine, connect_with_retry
from contact_service.shared.http import SecurityHeadersMiddleware, register_exception_handlers


# ================================================================================
#       FastAPI Setup
# ================================================================================
def create_app(config: Config | None = None) -> FastAPI:
    """Build the application and every component it depends on.

    The cipher is constructed here so that a bad key aborts before any
    request is served. The database is connected during startup.
    """
    config = config or load_config()

    handle = Logger(
        "contact_service",
        log_dir=config.paths.logs,
        level=config.logging.level,
        console=not config.production,
    )
    logger = handle.get_logger()

    try:
        cipher = Cipher.from_config(config.encryption, logger.getChild("cipher"))
    except ConfigurationError:
        handle.close()
        raise

    engine = build_engine(config.database)
    service = ContactService(
        repository=ContactRepository(engine, logger.getChild("repository")),
        transformer=FieldTransformer(cipher, logger.getChild("transform")),
        pagination=config.pagination,
        logger=logger.getChild("service"),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await run_in_threadpool(
                connect_with_retry,
                engine,
                logger,
                config.database.max_retries,
                config.database.retry_interval,
            )
            yield
        finally:
            logger.info("Shutting down")
            engine.dispose()
            handle.close()

    app = FastAPI(title=config.general.title, lifespan=lifespan)
    app.state.config = config
    app.state.contact_service = service

    for router in get_routers():
        app.include_router(router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app, logger.getChild("http"), config.production)

    return app


# ================================================================================
#       Command Line
# ================================================================================
def welcome(config: Config):
    handle = Logger("contact_service.cli", log_dir=config.paths.logs, level=config.logging.level)
    logger = handle.get_logger()

    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    logger.info("Starting contact service on %s:%s", config.network.host, config.network.port)
    handle.close()


def main(argv=None):
    try:
        config = load_config()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)

    welcome(config)

    import uvicorn

    uvicorn.run(
        "contact_service.main:create_app",
        factory=True,
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    main()
