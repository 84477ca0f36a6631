"""
Payment QR helper. The matrix is drawn as filled squares by the layout sections,
so no raster image is needed in either PDF backend.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import qrcode
from qrcode.exceptions import DataOverflowError

logger = logging.getLogger(__name__)


def make_qr_matrix(data: str) -> Optional[Sequence[Sequence[bool]]]:
    if not data:
        return None
    qr = qrcode.QRCode(border=1, box_size=1)
    try:
        qr.add_data(data)
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        logger.warning("QR payload rejected (%s); QR omitted", exc)
        return None
    return qr.get_matrix()
