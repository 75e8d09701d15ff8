#!/usr/bin/env python3
"""
PDF Conversion
DOCX -> PDF through an ordered chain of converters:

1. Gotenberg (external HTTP service), when GOTENBERG_URL is configured
2. Local LibreOffice (soffice --headless)

A Gotenberg failure is logged and the local converter is tried next.
"""

import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Optional

import requests

from document_generator import DOCX_MIMETYPE
from errors import ConversionServiceError, PdfConversionUnavailable

logger = logging.getLogger(__name__)

MAC_LIBREOFFICE_PATH = '/Applications/LibreOffice.app/Contents/MacOS'
HEALTH_TIMEOUT = 2.0


def ensure_libreoffice_on_path():
    """Prepend the macOS LibreOffice bundle to PATH when it is installed"""
    if sys.platform != 'darwin' or not os.path.isdir(MAC_LIBREOFFICE_PATH):
        return
    current = os.environ.get('PATH', '')
    if MAC_LIBREOFFICE_PATH not in current:
        os.environ['PATH'] = f"{MAC_LIBREOFFICE_PATH}{os.pathsep}{current}"


def has_libreoffice() -> bool:
    """True when `soffice --headless --version` runs successfully"""
    try:
        result = subprocess.run(
            ['soffice', '--headless', '--version'],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return result.returncode == 0
    except OSError:
        return False


def has_gotenberg(base_url: str, timeout: float = HEALTH_TIMEOUT) -> bool:
    """True when the Gotenberg /health route answers with a success status"""
    if not base_url:
        return False
    try:
        response = requests.get(f"{base_url.rstrip('/')}/health", timeout=timeout)
        return response.ok
    except requests.RequestException:
        return False


class GotenbergConverter:
    """Converts through Gotenberg's LibreOffice route"""

    def __init__(self, base_url: str, timeout: Optional[float] = None, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def convert(self, docx_bytes: bytes) -> bytes:
        endpoint = f"{self.base_url}/forms/libreoffice/convert"
        files = {'files': ('document.docx', docx_bytes, DOCX_MIMETYPE)}

        response = self.session.post(endpoint, files=files, timeout=self.timeout)
        if not response.ok:
            raise ConversionServiceError(response.status_code, response.text)
        return response.content


class LibreOfficeConverter:
    """Converts with a local `soffice` binary in a scratch directory"""

    def __init__(self, binary: str = 'soffice'):
        self.binary = binary

    def convert(self, docx_bytes: bytes) -> bytes:
        with tempfile.TemporaryDirectory(prefix='plaquinhas-') as tmpdir:
            source = Path(tmpdir) / 'document.docx'
            source.write_bytes(docx_bytes)

            subprocess.run(
                [
                    self.binary, '--headless', '--nologo', '--nodefault',
                    '--nolockcheck', '--norestore',
                    '--convert-to', 'pdf', '--outdir', tmpdir, str(source),
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )

            pdf_path = Path(tmpdir) / 'document.pdf'
            if not pdf_path.exists():
                raise RuntimeError('PDF not produced by LibreOffice.')
            return pdf_path.read_bytes()


class PdfConverterChain:
    """Tries each converter in order; the last one's failure is final"""

    def __init__(self, external: Optional[GotenbergConverter] = None,
                 local: Optional[LibreOfficeConverter] = None):
        self.external = external
        self.local = local or LibreOfficeConverter()

    @classmethod
    def from_config(cls, config) -> 'PdfConverterChain':
        external = None
        if config.gotenberg_url:
            external = GotenbergConverter(config.gotenberg_url, timeout=config.gotenberg_timeout)
        return cls(external=external)

    def convert(self, docx_bytes: bytes) -> bytes:
        """
        Convert a .docx archive to PDF

        Raises:
            PdfConversionUnavailable: Every converter failed
        """
        if self.external is not None:
            try:
                return self.external.convert(docx_bytes)
            except (ConversionServiceError, requests.RequestException) as e:
                logger.warning("Gotenberg erro: %s", e)

        try:
            return self.local.convert(docx_bytes)
        except (OSError, subprocess.SubprocessError, RuntimeError) as e:
            logger.warning("LibreOffice conversion failed: %s", e)
            if self.external is not None:
                raise PdfConversionUnavailable(
                    'Falha via Gotenberg e sem LibreOffice. '
                    'Verifique GOTENBERG_URL e o /health do serviço Gotenberg.'
                )
            raise PdfConversionUnavailable(
                'Falha ao converter para PDF. Configure GOTENBERG_URL ou instale o LibreOffice.'
            )


def convert_to_pdf(docx_bytes: bytes, config) -> bytes:
    """Convert with the chain configured for this deployment"""
    return PdfConverterChain.from_config(config).convert(docx_bytes)
