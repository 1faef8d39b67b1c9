"""Create the PeerLearn tables on the configured database."""

import logging

from app.database import Base, engine
from app import models  # noqa: F401  registers the mapped classes

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
