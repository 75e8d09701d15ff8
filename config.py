#!/usr/bin/env python3
"""
Plaquinhas Configuration
Environment-driven settings, read once at start-up
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parent


@dataclass
class Config:
    port: int = 4000
    jwt_secret: str = 'dev-secret-change'
    database_url: str = ''
    db_path: str = str(BASE_DIR / 'users.db')
    admin_email: str = ''
    gotenberg_url: str = ''
    gotenberg_timeout: Optional[float] = None
    templates_dir: str = str(BASE_DIR / 'modelo_placas')

    @classmethod
    def from_env(cls, environ=None) -> 'Config':
        """
        Build a Config from environment variables

        Args:
            environ: Mapping to read from (default: os.environ)
        """
        env = os.environ if environ is None else environ

        timeout = env.get('GOTENBERG_TIMEOUT')

        return cls(
            port=int(env.get('PORT', 4000)),
            jwt_secret=env.get('JWT_SECRET', 'dev-secret-change'),
            database_url=env.get('DATABASE_URL', ''),
            db_path=str(Path(env['DB_PATH']).resolve()) if env.get('DB_PATH') else str(BASE_DIR / 'users.db'),
            admin_email=env.get('ADMIN_EMAIL', '').strip().lower(),
            gotenberg_url=env.get('GOTENBERG_URL', '').rstrip('/'),
            gotenberg_timeout=float(timeout) if timeout else None,
            templates_dir=env.get('TEMPLATES_DIR', str(BASE_DIR / 'modelo_placas')),
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Relational store when DATABASE_URL is set, otherwise the SQLite file"""
        if self.database_url:
            # Heroku-style URLs are not accepted by SQLAlchemy 1.4+
            if self.database_url.startswith('postgres://'):
                return 'postgresql://' + self.database_url[len('postgres://'):]
            return self.database_url
        return f"sqlite:///{self.db_path}"
