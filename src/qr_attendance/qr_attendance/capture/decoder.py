from __future__ import annotations

from typing import Optional

from PIL import Image
from pyzbar.pyzbar import ZBarSymbol
from pyzbar.pyzbar import decode as pyzbar_decode


def decode_frame(image: Image.Image) -> Optional[str]:
    """Text of the first QR code found in ``image``, if any."""
    for symbol in pyzbar_decode(image, symbols=[ZBarSymbol.QRCODE]):
        data = symbol.data.decode("utf-8", errors="replace").strip()
        if data:
            return data
    return None
