"""Generate database session"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import get_settings
from src.db.schema import Base


@lru_cache
def get_engine() -> Engine:
    """Created on first use (not at import), so the URL can still be configured through the environment."""
    settings = get_settings()
    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def get_db() -> Generator[Session, None, None]:
    db = sessionmaker(bind=get_engine())()
    try:
        yield db
    finally:
        db.close()
