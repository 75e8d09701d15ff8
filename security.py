"""
Password hashing and access tokens
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from errors import Unauthorized

BCRYPT_ROUNDS = 10
JWT_ALGORITHM = 'HS256'
TOKEN_EXPIRE_DAYS = 7


def get_password_hash(password: str) -> str:
    """Hash password with a random salt (cost factor 10)"""
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    password_bytes = plain_password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def create_access_token(data: Dict[str, Any], secret: str,
                        expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=TOKEN_EXPIRE_DAYS))
    to_encode.update({'exp': expire})
    return jwt.encode(to_encode, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """Decode JWT token, raising Unauthorized when it is invalid or expired"""
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized()


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an `Authorization: Bearer ...` header"""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()
