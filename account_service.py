#!/usr/bin/env python3
"""
Account Service
Registration, login, password reset and the admin login history.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from errors import Conflict, Forbidden, InvalidInput, NotFound, Unauthorized, WrongPassword
from models import LoginEntry, User
from security import create_access_token, decode_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

LOGIN_RETENTION = timedelta(days=60)


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite does not keep tz info)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_email(email) -> str:
    return str(email or '').strip().lower()


def _clean_name(name) -> Optional[str]:
    name = str(name).strip() if name is not None else ''
    return name or None


class AccountService:
    """Thin CRUD over the users and login_entries tables"""

    def __init__(self, database, jwt_secret: str, admin_email: str = ''):
        """
        Args:
            database: database.Database
            jwt_secret: Token-signing secret
            admin_email: The only identity allowed to read login history
        """
        self.database = database
        self.jwt_secret = jwt_secret
        self.admin_email = normalize_email(admin_email)

    def register(self, email, password, first_name=None, last_name=None):
        """
        Create an account

        Raises:
            InvalidInput: Missing email or password
            Conflict: The normalized email is already registered
        """
        email = normalize_email(email)
        if not email or not password:
            raise InvalidInput()

        session = self.database.session()
        try:
            exists = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if exists:
                raise Conflict()

            session.add(User(
                email=email,
                password_hash=get_password_hash(str(password)),
                first_name=_clean_name(first_name),
                last_name=_clean_name(last_name),
                created_at=utcnow(),
            ))
            session.commit()
            logger.info("Registered %s", email)
        except IntegrityError:
            # Lost a race with a concurrent registration
            session.rollback()
            raise Conflict()
        finally:
            session.close()

    def login(self, email, password) -> Dict[str, str]:
        """
        Check credentials and record the login

        Returns:
            dict with token and email

        Raises:
            InvalidInput, NotFound, WrongPassword
        """
        email = normalize_email(email)
        if not email or not password:
            raise InvalidInput()

        session = self.database.session()
        try:
            user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if user is None:
                raise NotFound()
            if not verify_password(str(password), user.password_hash):
                raise WrongPassword()

            token = create_access_token({'sub': str(user.id), 'email': user.email}, self.jwt_secret)
            self._log_login(session, user)
            return {'token': token, 'email': user.email}
        finally:
            session.close()

    def _log_login(self, session, user: User):
        session.add(LoginEntry(
            user_id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=utcnow(),
        ))
        session.commit()

        # Retention is best effort; a failed prune must not fail the login
        try:
            session.execute(delete(LoginEntry).where(LoginEntry.created_at < utcnow() - LOGIN_RETENTION))
            session.commit()
        except Exception as e:
            session.rollback()
            logger.warning(f"Could not prune login entries: {e}")

    def reset_password(self, email, new_password):
        """
        Replace a user's password hash

        Raises:
            InvalidInput, NotFound
        """
        email = normalize_email(email)
        if not email or not new_password:
            raise InvalidInput()

        session = self.database.session()
        try:
            user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if user is None:
                raise NotFound()
            user.password_hash = get_password_hash(str(new_password))
            session.commit()
            logger.info("Password reset for %s", email)
        finally:
            session.close()

    def authorize_admin(self, token: Optional[str]) -> Dict:
        """
        Validate a bearer token for the admin identity

        Raises:
            Unauthorized: Missing or invalid token
            Forbidden: Valid token for any other identity
        """
        if not token:
            raise Unauthorized()
        payload = decode_token(token, self.jwt_secret)
        if not self.admin_email or normalize_email(payload.get('email')) != self.admin_email:
            raise Forbidden()
        return payload

    def list_recent_logins(self, token: Optional[str]) -> List[Dict]:
        """Login entries of the last 60 days, newest first (admin only)"""
        self.authorize_admin(token)

        cutoff = utcnow() - LOGIN_RETENTION
        session = self.database.session()
        try:
            entries = session.execute(
                select(LoginEntry)
                .where(LoginEntry.created_at >= cutoff)
                .order_by(LoginEntry.created_at.desc(), LoginEntry.id.desc())
            ).scalars().all()
            return [entry.to_dict() for entry in entries]
        finally:
            session.close()
