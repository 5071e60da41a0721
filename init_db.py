# init_db.py
import logging

from app.db.session import Base, engine
import app.db.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def init():
    logger.info("Creating tables (if not exist)...")
    Base.metadata.create_all(bind=engine)
    logger.info("Done.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()
