"""QR encoder — PNG shape, exact round trip, overflow reporting."""

import io

import pytest
from PIL import Image

from errors import EncodeError
from synthesis import QR_SIZE, encode_qr

URL = "https://example.com/jane"


def test_output_is_256px_png():
    png = encode_qr(URL)
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    with Image.open(io.BytesIO(png)) as img:
        assert img.format == "PNG"
        assert img.size == (QR_SIZE, QR_SIZE)


def test_round_trip_decodes_to_exact_url():
    cv2 = pytest.importorskip("cv2")
    np = pytest.importorskip("numpy")
    png = encode_qr(URL)
    img = cv2.imdecode(np.frombuffer(png, dtype=np.uint8), cv2.IMREAD_GRAYSCALE)
    data, _, _ = cv2.QRCodeDetector().detectAndDecode(img)
    assert data == URL


def test_encoding_is_idempotent():
    assert encode_qr(URL) == encode_qr(URL)


def test_payload_too_long_raises_encode_error():
    with pytest.raises(EncodeError) as exc:
        encode_qr("https://example.com/" + "x" * 5000)
    assert exc.value.message
    assert exc.value.code == "ENCODE_ERROR"
