import base64
import io
import logging
import os
from typing import Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_H

log = logging.getLogger(__name__)

QR_TARGET_SIZE = 1024
QR_BORDER = 2
QR_DARK_DEFAULT = "#000000"
QR_LIGHT = "#FFFFFF"


def make_qr_png(payload: str, dark_color: Optional[str] = None) -> bytes:
    """PNG bytes of a high error-correction QR code, roughly QR_TARGET_SIZE pixels wide."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, border=QR_BORDER)
    qr.add_data(payload)
    qr.make(fit=True)
    qr.box_size = max(1, QR_TARGET_SIZE // (qr.modules_count + 2 * QR_BORDER))

    img = qr.make_image(fill_color=dark_color or QR_DARK_DEFAULT, back_color=QR_LIGHT)
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


def qr_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def save_qr_code(png: bytes, upload_root: str, slug: str) -> str:
    """Write ``<upload_root>/qrcodes/<slug>-qr.png``; returns its public path."""
    qr_dir = os.path.join(upload_root, "qrcodes")
    os.makedirs(qr_dir, exist_ok=True)
    filename = f"{slug}-qr.png"
    with open(os.path.join(qr_dir, filename), "wb") as f:
        f.write(png)
    log.info("Saved QR code for '%s'", slug)
    return f"/uploads/qrcodes/{filename}"


def generate_qr_code(payload: str, slug: str, upload_root: str, serverless: bool,
                     dark_color: Optional[str] = None) -> str:
    """Returns where the QR lives: a data URL on serverless hosts, an upload path otherwise."""
    png = make_qr_png(payload, dark_color)
    if serverless:
        return qr_data_url(png)
    return save_qr_code(png, upload_root, slug)
