"""QR codes for equipment labels.

The encoded payload is a small JSON document so a phone scanner shows
something useful even without network access; ``url`` points at the public
lookup page when ``PUBLIC_BASE_URL`` is configured.
"""

from __future__ import annotations

import base64
import io
import json
from typing import Any

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from .config import settings

BOX_SIZE = 10
BORDER = 2


def equipment_qr_payload(equipment: Any) -> dict[str, Any]:
    brand = getattr(equipment, "brand", None)
    return {
        "id": equipment.id,
        "name": equipment.name,
        "brand": brand.name if brand is not None else None,
        "status": equipment.status,
        "url": settings.public_equipment_url(equipment.id),
    }


def qr_data_url(data: str) -> str:
    """Encode ``data`` as a PNG and return it as a ``data:`` URL."""

    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=BOX_SIZE, border=BORDER)
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def equipment_qr_code(equipment: Any) -> str:
    payload = equipment_qr_payload(equipment)
    return qr_data_url(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
