from __future__ import annotations

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def render_qr_png(data: str, *, box_size: int = 8, border: int = 2) -> bytes:
    """Render ``data`` as a PNG QR code."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr_base64(data: str) -> str:
    return base64.b64encode(render_qr_png(data)).decode("utf-8")
