"""
Raw webhook body normalization.

Signatures are computed over the exact bytes Acuity sent, so callers must
hand over the unmodified body. Text is encoded as UTF-8.
"""

from typing import Union

from .errors import UnsupportedBodyType

RawBody = Union[str, bytes, bytearray, memoryview]

BODY_ENCODING = "utf-8"


def encode_text(text: str) -> bytes:
    """
    Encode text as UTF-8, replacing lone surrogates with U+FFFD.

    Valid surrogate pairs are joined first, so no input raises.
    """
    cleaned = text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return cleaned.encode(BODY_ENCODING)


def normalize_body(body: RawBody) -> bytes:
    """
    Coerce a raw body into bytes.

    Args:
        body: Request body as text, bytes, bytearray or a memoryview.
            Only the bytes covered by a memoryview are used.

    Returns:
        The body as bytes

    Raises:
        UnsupportedBodyType: For any other input type

    Examples:
        >>> normalize_body("action=scheduled&id=1")
        b'action=scheduled&id=1'
        >>> normalize_body(memoryview(b"xxid=1xx")[2:6])
        b'id=1'
    """
    if isinstance(body, str):
        return encode_text(body)

    if isinstance(body, bytes):
        return body

    if isinstance(body, bytearray):
        return bytes(body)

    if isinstance(body, memoryview):
        # tobytes() copies exactly the view, honoring slicing and strides
        return body.tobytes()

    raise UnsupportedBodyType(
        f"Unsupported static webhook body type: {type(body).__name__}"
    )


def decode_body(data: bytes) -> str:
    """Decode normalized body bytes to text, replacing undecodable sequences."""
    return data.decode(BODY_ENCODING, errors="replace")
