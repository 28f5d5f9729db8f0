"""
TrackOrb Sample Decoder
Turns one BLE notification payload into a Sample
"""

import base64
import binascii
import math
import re
from typing import Union

from ...errors import MalformedSample
from ...models import Sample, SAMPLE_FIELDS

FIELD_SEPARATOR = ','

ENCODING_BASE64 = 'base64'
ENCODING_TEXT = 'text'

# Plain decimal or exponent notation only (no "1_000", "nan", "inf")
DECIMAL_TOKEN = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def decode_payload(payload: Union[bytes, bytearray, str], encoding: str = ENCODING_BASE64) -> Sample:
    """
    Decode one notification payload

    Args:
        payload: Characteristic value as delivered by the link
        encoding: 'base64' for base64 wrapped CSV text, 'text' for raw CSV bytes

    Returns:
        The decoded Sample

    Raises:
        MalformedSample if the payload cannot be decoded to exactly 10 numbers
    """
    if encoding == ENCODING_BASE64:
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedSample(f"invalid base64 ({e})", _printable(payload))
    elif encoding == ENCODING_TEXT:
        raw = payload.encode('ascii', errors='replace') if isinstance(payload, str) else bytes(payload)
    else:
        raise ValueError(f"Unknown payload encoding: {encoding}")

    try:
        text = raw.decode('ascii')
    except UnicodeDecodeError:
        raise MalformedSample("payload is not ASCII text", _printable(raw))

    return parse_record(text)


def parse_record(text: str) -> Sample:
    """
    Parse a comma separated record in wire order

    timestamp, yaw, pitch, roll, accelX, accelY, accelZ, gyroX, gyroY, gyroZ

    Raises:
        MalformedSample on a wrong token count, an empty or non-numeric
        token, or a non-finite value
    """
    tokens = text.strip().split(FIELD_SEPARATOR)
    if len(tokens) != len(SAMPLE_FIELDS):
        raise MalformedSample(
            f"expected {len(SAMPLE_FIELDS)} values, got {len(tokens)}", text
        )

    values = []
    for name, token in zip(SAMPLE_FIELDS, tokens):
        token = token.strip()
        if not DECIMAL_TOKEN.fullmatch(token):
            raise MalformedSample(f"non-numeric {name} token {token!r}", text)
        value = float(token)
        if not math.isfinite(value):
            raise MalformedSample(f"non-finite {name} value {token!r}", text)
        values.append(value)

    return Sample(*values)


def _printable(payload) -> str:
    if isinstance(payload, str):
        return payload
    return bytes(payload).decode('ascii', errors='replace')
