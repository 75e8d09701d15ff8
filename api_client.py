#!/usr/bin/env python3
"""
Plaquinhas API Client
==========================

Talks to a running plaquinhas server over HTTP:
- Health check
- Register / login / password reset
- Admin login history
- Per-item DOCX and PDF generation
"""

import requests
from typing import Dict, List, Optional

DEFAULT_TIMEOUT = 30
# PDF conversion goes through LibreOffice or Gotenberg and can take a while
GENERATE_TIMEOUT = 120


class ApiError(Exception):
    """Non-success response; message is the server's `error` field"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """Client for the plaquinhas HTTP API"""

    def __init__(self, base_url: str = "http://localhost:4000", session=None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = None

    def _check(self, response, default_message: str = 'Falha na solicitação'):
        if response.ok:
            return response
        message = default_message
        try:
            data = response.json()
            if data and data.get('error'):
                message = data['error']
        except ValueError:
            pass
        raise ApiError(message, response.status_code)

    def health(self) -> Dict:
        response = self.session.get(f"{self.base_url}/api/health", timeout=10)
        return self._check(response).json()

    def register(self, email: str, password: str, first_name: str = None, last_name: str = None) -> Dict:
        payload = {'email': email, 'password': password}
        if first_name:
            payload['firstName'] = first_name
        if last_name:
            payload['lastName'] = last_name
        response = self.session.post(f"{self.base_url}/api/register", json=payload, timeout=self.timeout)
        return self._check(response, 'Falha no cadastro').json()

    def login(self, email: str, password: str) -> Dict:
        """
        Login and keep the token for admin calls

        Returns:
            dict with ok, token and email
        """
        response = self.session.post(
            f"{self.base_url}/api/login",
            json={'email': email, 'password': password},
            timeout=self.timeout
        )
        data = self._check(response, 'Falha no login').json()
        self.token = data.get('token')
        return data

    def reset_password(self, email: str, new_password: str) -> Dict:
        response = self.session.post(
            f"{self.base_url}/api/reset-password",
            json={'email': email, 'newPassword': new_password},
            timeout=self.timeout
        )
        return self._check(response).json()

    def admin_logins(self) -> List[Dict]:
        headers = {'Authorization': f'Bearer {self.token}'} if self.token else {}
        response = self.session.get(f"{self.base_url}/api/admin/logins", headers=headers, timeout=self.timeout)
        return self._check(response).json().get('entries', [])

    def generate(self, fmt: str, model: str, item, value: str) -> bytes:
        """
        Generate one tag

        Args:
            fmt: 'docx' or 'pdf'
            model: Template preset
            item: Item number
            value: Display value

        Returns:
            bytes: The file contents
        """
        if fmt not in ('docx', 'pdf'):
            raise ValueError(f"Unsupported format: {fmt}")
        response = self.session.post(
            f"{self.base_url}/api/generate/{fmt}",
            json={'model': model, 'item': str(item), 'valor': value},
            timeout=max(self.timeout, GENERATE_TIMEOUT)
        )
        return self._check(response).content
