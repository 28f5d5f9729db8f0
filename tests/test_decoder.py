"""Tests for notification payload decoding."""

import base64

import pytest

from trackorb_system.errors import MalformedSample
from trackorb_system.models import Sample
from trackorb_system.sensors.orb.decoder import decode_payload, parse_record

from tests.conftest import encode_record

RECORD = [1.5, 10.0, -20.0, 30.0, 0.1, 0.2, 9.81, 0.01, -0.02, 0.03]


def test_decodes_base64_record():
    sample = decode_payload(encode_record(RECORD))
    assert sample == Sample(*RECORD)


def test_accepts_str_payload():
    payload = encode_record(RECORD).decode('ascii')
    assert decode_payload(payload).accel_z == pytest.approx(9.81)


def test_text_encoding_takes_raw_csv():
    payload = ','.join(str(v) for v in RECORD).encode('ascii')
    assert decode_payload(payload, encoding='text') == Sample(*RECORD)


def test_tolerates_whitespace_and_newline():
    sample = parse_record(' 1, 2 ,3,4,5,6,7,8,9,10\r\n')
    assert sample.as_tuple() == tuple(float(v) for v in range(1, 11))


@pytest.mark.parametrize('text', [
    '1,2,3,4,5,6,7,8,9',                 # too few
    '1,2,3,4,5,6,7,8,9,10,11',           # too many
    '1,2,3,4,,6,7,8,9,10',               # empty token
    '1,2,3,4,abc,6,7,8,9,10',            # non-numeric
    '1,2,3,4,nan,6,7,8,9,10',            # non-finite
    '1,2,3,4,inf,6,7,8,9,10',
    '1,2,3,4,1_000,6,7,8,9,10',           # digit grouping
    '1,2,3,4,0x1A,6,7,8,9,10',            # hex
    '1,2,3,4,1e999,6,7,8,9,10',           # overflows to inf
    '',
])
def test_rejects_bad_records(text):
    with pytest.raises(MalformedSample):
        parse_record(text)


def test_rejects_invalid_base64():
    with pytest.raises(MalformedSample):
        decode_payload(b'not base64!!')


def test_rejects_non_ascii_content():
    payload = base64.b64encode('1,2,3,4,5,6,7,8,9,1é'.encode('utf-8'))
    with pytest.raises(MalformedSample):
        decode_payload(payload)


def test_malformed_sample_is_a_value_error():
    with pytest.raises(ValueError):
        parse_record('1,2')


def test_unknown_encoding():
    with pytest.raises(ValueError, match='Unknown payload encoding'):
        decode_payload(b'', encoding='hex')


@pytest.mark.parametrize('token, expected', [
    ('-1.5', -1.5),
    ('+2', 2.0),
    ('.5', 0.5),
    ('3.', 3.0),
    ('1e-3', 0.001),
    ('-2.5E+2', -250.0),
])
def test_accepts_decimal_spellings(token, expected):
    assert parse_record(f'0,{token},0,0,0,0,0,0,0,0').yaw == expected
