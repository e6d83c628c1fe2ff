import typing as t
from io import BytesIO

import orjson
import qrcode


def encode_qr_payload(payload: dict[str, t.Any]) -> str:
    """Serialize a ticket payload into the compact JSON string carried by the QR code."""
    return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode("utf-8")


def render_qr_png(payload: dict[str, t.Any]) -> bytes:
    """Render a ticket payload as a PNG QR code.

    Args:
        payload: The ticket's QR payload.

    Returns:
        The PNG image as bytes.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(encode_qr_payload(payload))
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffered = BytesIO()
    img.save(buffered, "PNG")
    return buffered.getvalue()
