# pharmatrust/qr.py
import base64
from io import BytesIO

import qrcode

from pharmatrust.errors import ValidationError


def encode_qr(text: str) -> str:
    """
    Render `text` as a PNG QR code and return it as a data URI
    (data:image/png;base64,...), ready to drop into an <img src>.
    """
    if not isinstance(text, str) or not text:
        raise ValidationError("QR payload must be a non-empty string")

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=4,
    )
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    qr_base64 = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{qr_base64}"
