"""
SQLAlchemy ORM Models
"""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    created_at = Column(DateTime, nullable=False)


class LoginEntry(Base):
    __tablename__ = 'login_entries'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer)
    email = Column(String)
    first_name = Column(String)
    last_name = Column(String)
    created_at = Column(DateTime, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
