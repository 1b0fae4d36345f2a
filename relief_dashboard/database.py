from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import OperationalError
import time
import logging

from relief_dashboard import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.SQLALCHEMY_DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # FastAPI serves sync routes from a threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db():
    from relief_dashboard import models  # noqa: F401  registers the tables
    Base.metadata.create_all(bind=engine)


def get_db():
    max_retries = 3
    retry_count = 0
    while True:
        try:
            db = SessionLocal()
            db.connection()
            break
        except OperationalError:
            db.close()
            retry_count += 1
            logger.warning(f"Database unavailable. Attempt {retry_count}/{max_retries}")
            if retry_count == max_retries:
                raise
            time.sleep(2)
    try:
        yield db
    finally:
        db.close()
