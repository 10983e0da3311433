"""
Representation synthesis: IdentityRecord -> HTML page, vCard text, QR PNG.

Every function here is pure. The home template is compiled once at import
and only read afterwards, so it is safe to share across worker threads.
"""
import io
import logging

import qrcode
from jinja2 import Environment, Template, TemplateError
from PIL import Image
from qrcode.exceptions import DataOverflowError

from errors import EncodeError, RenderError
from schemas import IdentityRecord

logger = logging.getLogger(__name__)

QR_SIZE = 256
QR_BORDER = 4

# ------------------------------
# HTML
# ------------------------------

HOME_SOURCE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ record.display_name }} - Contact Info</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            max-width: 600px;
            margin: 0 auto;
            padding: 20px;
            line-height: 1.6;
            background: #f5f5f5;
        }
        .container {
            background: white;
            border-radius: 8px;
            padding: 30px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }
        h1 {
            text-align: center;
            margin-bottom: 30px;
            color: #333;
            font-size: 2em;
        }
        .contact-list {
            list-style: none;
            padding: 0;
            margin-bottom: 20px;
        }
        .contact-list li {
            margin-bottom: 15px;
            padding: 10px;
            background: #f9f9f9;
            border-radius: 5px;
            transition: background 0.2s;
        }
        .contact-list li:hover { background: #e9e9e9; }
        .contact-list strong {
            display: inline-block;
            min-width: 100px;
            color: #555;
        }
        .contact-list a {
            text-decoration: none;
            color: #007bff;
            word-break: break-all;
        }
        .contact-list a:hover { text-decoration: underline; }
        .btn {
            display: block;
            width: 100%;
            padding: 15px;
            background: #28a745;
            color: white;
            text-align: center;
            text-decoration: none;
            border-radius: 5px;
            margin-top: 20px;
            font-weight: bold;
            transition: background 0.2s;
        }
        .btn:hover { background: #218838; }
        @media (max-width: 600px) {
            body { padding: 10px; }
            .container { padding: 20px; }
            h1 { font-size: 1.5em; }
            .contact-list strong {
                display: block;
                margin-bottom: 5px;
            }
        }
    </style>
</head>
<body>
    <div class="container">
        <h1>{{ record.display_name }}</h1>
        <ul class="contact-list">
            {% if record.email %}<li><strong>Email:</strong> <a href="mailto:{{ record.email }}">{{ record.email }}</a></li>{% endif %}
            {% if record.phone %}<li><strong>Phone:</strong> <a href="tel:{{ record.phone }}">{{ record.phone }}</a></li>{% endif %}
            {% if record.bluesky %}<li><strong>Bluesky:</strong> <a href="{{ record.bluesky|safe_url }}" target="_blank" rel="noopener">Profile</a></li>{% endif %}
            {% if record.github %}<li><strong>GitHub:</strong> <a href="{{ record.github|safe_url }}" target="_blank" rel="noopener">Profile</a></li>{% endif %}
            {% if record.whatsapp %}<li><strong>WhatsApp:</strong> <a href="{{ record.whatsapp|safe_url }}" target="_blank" rel="noopener">Chat</a></li>{% endif %}
            {% if record.facebook %}<li><strong>Facebook:</strong> <a href="{{ record.facebook|safe_url }}" target="_blank" rel="noopener">Profile</a></li>{% endif %}
        </ul>
        <a href="/contact.vcf" class="btn">Download Contact (vCard)</a>
    </div>
</body>
</html>
"""

SAFE_URL_SCHEMES = ("http", "https", "mailto", "tel")
UNSAFE_URL = "#ZgotmplZ"


def safe_url(value: str) -> str:
    """Pass relative URLs and allowed schemes; replace anything else."""
    scheme, sep, _ = value.partition(":")
    if sep and "/" not in scheme and scheme.strip().lower() not in SAFE_URL_SCHEMES:
        return UNSAFE_URL
    return value


_env = Environment(autoescape=True)
_env.filters["safe_url"] = safe_url
HOME_TEMPLATE = _env.from_string(HOME_SOURCE)


def render_home(record: IdentityRecord, template: Template = HOME_TEMPLATE) -> str:
    try:
        return template.render(record=record)
    except TemplateError as e:
        raise RenderError(f"Template execution error: {e}") from e

# ------------------------------
# vCard
# ------------------------------

def _vcard_value(value: str) -> str:
    # A raw line break would end the property early
    return value.replace("\r\n", "\\n").replace("\r", "\\n").replace("\n", "\\n")


def encode_vcard(record: IdentityRecord) -> str:
    """Build a vCard 3.0 document.

    WhatsApp is listed as a URL but never as a NOTE label.
    """
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{_vcard_value(record.display_name)}",
    ]
    if record.email:
        lines.append(f"EMAIL:{_vcard_value(record.email)}")
    if record.phone:
        lines.append(f"TEL;TYPE=CELL:{_vcard_value(record.phone)}")
    for url in (record.canonical_url, record.github, record.facebook,
                record.bluesky, record.whatsapp):
        if url:
            lines.append(f"URL:{_vcard_value(url)}")

    labelled = (
        ("Bluesky", record.bluesky),
        ("GitHub", record.github),
        ("Facebook", record.facebook),
    )
    notes = "".join(
        f"{label}: {_vcard_value(value)}\\n" for label, value in labelled if value
    )
    if notes:
        lines.append(f"NOTE:{notes}")

    return "".join(f"{line}\n" for line in lines) + "END:VCARD"

# ------------------------------
# QR
# ------------------------------

def encode_qr(url: str) -> bytes:
    """Encode url as a 256x256 PNG QR code at error-correction level M."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=1,
        border=QR_BORDER,
    )
    try:
        qr.add_data(url)
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise EncodeError(str(e) or "content too long to encode") from e

    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.resize((QR_SIZE, QR_SIZE), Image.Resampling.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    logger.debug(f"QR version {qr.version} encoded ({len(url)} bytes payload)")
    return buf.getvalue()
