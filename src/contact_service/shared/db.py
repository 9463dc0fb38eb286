import logging
import time

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine

from contact_service.models.schema import *  # noqa: F403 # SQLModel subclasses need to be in memory
from contact_service.shared.config import Database
from contact_service.shared.errors import PersistenceError


def build_engine(database: Database) -> Engine:
    connect_args = {}
    if database.url.startswith("sqlite"):
        # Requests are served from a worker thread pool
        connect_args["check_same_thread"] = False
    return create_engine(database.url, connect_args=connect_args)


def connect_with_retry(
    engine: Engine,
    logger: logging.Logger,
    max_retries: int = 5,
    retry_interval: float = 5.0,
) -> Engine:
    """Verify the connection and create the schema.

    A failed attempt is retried up to ``max_retries`` times, sleeping
    ``retry_interval`` seconds in between. Raises PersistenceError once the
    retries are exhausted.
    """
    attempt = 0
    while True:
        logger.info("Connecting to database")
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            SQLModel.metadata.create_all(engine)
        except SQLAlchemyError as e:
            if attempt < max_retries:
                attempt += 1
                logger.error(
                    "Error connecting to database. Retrying in %s seconds (%s/%s): %s",
                    retry_interval,
                    attempt,
                    max_retries,
                    e,
                )
                time.sleep(retry_interval)
                continue
            logger.error("Max retry attempts reached. Failed to connect to database.")
            raise PersistenceError("Unable to connect to database") from e

        logger.info("Database connected")
        return engine
