"""
services/face_verification.py
-----------------
Alternative submission path: post the photo to an Odoo HTTP controller
(/submit_face) that matches the face server-side and answers with an HTML page.
"""

import html
import logging
import re

import requests

from services.odoo_rpc import USER_AGENT

_logger = logging.getLogger(__name__)

MESSAGE_RE = re.compile(r'<p[^>]*class="message"[^>]*>(.*?)</p>', re.IGNORECASE | re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")


def extract_message_from_html(page):
    match = MESSAGE_RE.search(page or "")
    message = match.group(1) if match else (page or "")
    message = TAG_RE.sub("", message)
    return html.unescape(message).replace("\xa0", " ").strip()


def submit_face_via_controller(base_url, base64_image, latitude=None, longitude=None,
                               timeout=60, session=None):
    url = f"{(base_url or '').rstrip('/')}/submit_face"
    http = session or requests
    data = {
        "face_image": f"data:image/jpeg;base64,{base64_image}",
        "latitude": "" if latitude is None else str(latitude),
        "longitude": "" if longitude is None else str(longitude),
    }

    try:
        response = http.post(
            url,
            data=data,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
    except requests.RequestException as e:
        _logger.warning("Face verification request failed: %s", e)
        return {"success": False, "error": f"Face verification failed: {e}"}

    if response.status_code != 200:
        return {"success": False, "error": f"HTTP {response.status_code}"}

    message = extract_message_from_html(response.text)
    if "Success" in message or "✅" in message:
        return {"success": True, "message": message}
    return {"success": False, "error": message}
