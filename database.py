"""
Database Configuration and Management (SQLAlchemy)

A relational store when DATABASE_URL is set, otherwise an embedded SQLite
file. Both get the same two tables: users and login_entries.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from models import Base

logger = logging.getLogger(__name__)


class Database:
    """Engine and session factory for one storage URL"""

    def __init__(self, url: str):
        self.url = url
        self.mode = 'sqlite' if url.startswith('sqlite') else 'sql'

        if self.mode == 'sqlite':
            db_file = url.replace('sqlite:///', '', 1)
            if db_file and db_file != ':memory:':
                Path(db_file).parent.mkdir(parents=True, exist_ok=True)
            # Flask serves requests from several threads
            self.engine = create_engine(url, echo=False, connect_args={'check_same_thread': False})
        else:
            self.engine = create_engine(url, echo=False, pool_pre_ping=True)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_config(cls, config) -> 'Database':
        return cls(config.sqlalchemy_url)

    def session(self):
        """New session; callers close it"""
        return self.SessionLocal()

    def init_database(self):
        """Create tables if they do not exist"""
        logger.info("Initializing %s database...", self.mode)
        try:
            Base.metadata.create_all(bind=self.engine)
        except Exception as e:
            logger.error(f"Error initializing database: {e}")
            raise
