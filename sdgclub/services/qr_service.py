"""
QR code generation, decoding and member payload handling
"""

import hashlib
import hmac
import io
import json
from typing import Dict, Optional

import qrcode
import zxingcpp
from PIL import Image, UnidentifiedImageError

from sdgclub.core.config import settings
from sdgclub.models import Member
from sdgclub.services.errors import InvalidQRCode

class QRService:
    """Service for generating and reading QR codes"""

    @staticmethod
    def render_png(data: str, error_correction=qrcode.constants.ERROR_CORRECT_H, box_size: int = 10) -> bytes:
        """Render arbitrary text as a PNG QR code"""
        qr = qrcode.QRCode(
            version=None,
            error_correction=error_correction,
            box_size=box_size,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def sign(member_id: str, matric_number: str, secret: str) -> str:
        message = f"{member_id}:{matric_number}".encode("utf-8")
        return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    @staticmethod
    def member_payload(member: Member) -> str:
        """JSON payload encoded in a member's check-in QR code"""
        payload = {
            "type": settings.QR_PAYLOAD_TYPE,
            "id": member.id,
            "matric": member.matric_number,
        }
        if settings.QR_SIGNING_SECRET:
            payload["sig"] = QRService.sign(member.id, member.matric_number, settings.QR_SIGNING_SECRET)
        return json.dumps(payload)

    @staticmethod
    def generate_member_qr(member: Member) -> bytes:
        return QRService.render_png(QRService.member_payload(member))

    @staticmethod
    def parse_member_payload(text: str, secret: Optional[str] = None) -> Dict[str, str]:
        """Validate scanned text and return the member reference it carries.

        Raises InvalidQRCode for anything that is not a club member code.
        When a signing secret is configured the payload must carry a valid
        signature as well.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise InvalidQRCode(details="Could not read QR code data") from exc

        if not isinstance(data, dict):
            raise InvalidQRCode(details="Could not read QR code data")
        if data.get("type") != settings.QR_PAYLOAD_TYPE or not data.get("id"):
            raise InvalidQRCode(details="This is not a valid AHSAC member QR code")

        member_id = str(data["id"])
        matric = str(data.get("matric") or "")

        secret = secret if secret is not None else settings.QR_SIGNING_SECRET
        if secret:
            expected = QRService.sign(member_id, matric, secret)
            if not hmac.compare_digest(expected, str(data.get("sig") or "")):
                raise InvalidQRCode(details="QR code signature is not valid")

        return {"id": member_id, "matric": matric}

    @staticmethod
    def decode_image(image_bytes: bytes) -> str:
        """Read the first QR code found in an uploaded image"""
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidQRCode(details="Uploaded file is not an image") from exc

        results = zxingcpp.read_barcodes(image, formats=zxingcpp.BarcodeFormat.QRCode)
        if not results:
            raise InvalidQRCode(details="No QR code found in image")
        return results[0].text

    @staticmethod
    def registration_url(slug: str) -> str:
        return f"{settings.BASE_URL}/register?ref={slug}"

    @staticmethod
    def generate_registration_qr(slug: str) -> bytes:
        """QR code for sharing a registration link"""
        return QRService.render_png(QRService.registration_url(slug), error_correction=qrcode.constants.ERROR_CORRECT_M)
