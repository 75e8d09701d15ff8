#!/usr/bin/env python3
"""
Batch Exporter
Exports every card of a workspace into one ZIP, one request at a time.

Progress is reported after each item and cancellation is checked between
items. A cancelled export produces nothing.
"""

import io
import logging
import threading
import zipfile
from typing import Callable, Dict, List, Optional

from document_generator import attachment_filename
from table_parser import Item

logger = logging.getLogger(__name__)

ARCHIVE_NAMES = {
    'docx': 'plaquinhas-docx.zip',
    'pdf': 'plaquinhas-pdf.zip',
}

ProgressCallback = Callable[[int, int, float], None]


class BatchExporter:
    """Sequential per-item export through an ApiClient-like `generate`"""

    def __init__(self, client):
        self.client = client
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def export(self, items: List[Item], model: str, fmt: str,
               progress: Optional[ProgressCallback] = None) -> Optional[bytes]:
        """
        Generate every item and zip the results

        Args:
            items: Parsed items, in order
            model: Template preset
            fmt: 'docx' or 'pdf'
            progress: Called as progress(done, total, percent) after each item

        Returns:
            ZIP bytes, or None when the export was cancelled
        """
        self._cancelled.clear()
        total = len(items) or 1
        # Item numbers may repeat; a later file replaces an earlier one of
        # the same name and keeps its position in the archive
        files: Dict[str, bytes] = {}

        for done, item in enumerate(items, start=1):
            if self.cancelled:
                logger.info("Export cancelled after %d of %d items", done - 1, len(items))
                return None

            content = self.client.generate(fmt, model, item.item_number, item.display_value)
            name = attachment_filename(model, item.item_number, fmt)
            if name in files:
                logger.warning("Duplicate item %s, replacing %s", item.item_number, name)
            files[name] = content

            if progress:
                progress(done, len(items), round(done / total * 100))

        if self.cancelled:
            return None

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as archive:
            for name, content in files.items():
                archive.writestr(name, content)
        return buffer.getvalue()
