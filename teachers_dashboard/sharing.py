"""
Sharing utilities: public profile links, social-media share URLs and QR codes.
"""

import io
import logging
import re
from urllib.parse import quote

import qrcode

from .config import (
    PROFILE_BASE_URL,
    QR_BORDER,
    QR_BOX_SIZE,
    QR_DARK_COLOR,
    QR_LIGHT_COLOR,
)

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def profile_url(teacher_id: int, base_url: str = PROFILE_BASE_URL) -> str:
    """Public profile URL for a teacher."""
    return f"{base_url.rstrip('/')}/teacher/{teacher_id}"


def share_content(
    teacher_id: int,
    teacher_name: str,
    achievements: str = "",
    base_url: str = PROFILE_BASE_URL,
) -> dict:
    """Title, text and URL for sharing a teacher profile."""
    text = (
        f"{teacher_name} - {achievements}"
        if achievements
        else f"View {teacher_name}'s teaching profile"
    )
    return {
        "title": f"Check out {teacher_name}'s achievements",
        "text": text,
        "url": profile_url(teacher_id, base_url),
    }


def social_share_links(
    teacher_id: int,
    teacher_name: str,
    achievements: str = "",
    base_url: str = PROFILE_BASE_URL,
) -> dict[str, str]:
    """Share URLs for Twitter, LinkedIn and Facebook."""
    content = share_content(teacher_id, teacher_name, achievements, base_url)
    text = _encode(content["text"])
    url = _encode(content["url"])
    return {
        "twitter": f"https://twitter.com/intent/tweet?text={text}&url={url}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={url}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={url}",
    }


def qr_code_png(data: str) -> bytes:
    """Render ``data`` (normally a profile URL) as a PNG QR code."""
    qr = qrcode.QRCode(box_size=QR_BOX_SIZE, border=QR_BORDER)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color=QR_DARK_COLOR, back_color=QR_LIGHT_COLOR)

    buffer = io.BytesIO()
    img.save(buffer)
    logger.debug("Rendered QR code (version %d) for %s", qr.version, data)
    return buffer.getvalue()


def qr_filename(teacher_name: str) -> str:
    """Download filename for a teacher's QR code, e.g. ``jane-doe-qr-code.png``."""
    slug = re.sub(r"\s+", "-", teacher_name.strip().lower()) or "teacher"
    return f"{slug}-qr-code.png"
