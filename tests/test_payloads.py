import pytest

from src.codec.exceptions import EmptyURIPayload, InvalidTextRecord
from src.codec.payloads import (
    build_uri_record,
    decode_text,
    decode_uri,
    encode_text,
    encode_uri,
)
from src.codec.prefixes import URI_PREFIXES, longest_prefix, uri_prefix


def test_prefix_table():
    assert len(URI_PREFIXES) == 36
    assert uri_prefix(0x00) == ""
    assert uri_prefix(0x01) == "http://www."
    assert uri_prefix(0x04) == "https://"
    assert uri_prefix(0x07) == "ftp://anonymous:anonymous@"
    assert uri_prefix(0x1D) == "file://"
    assert uri_prefix(0x23) == "urn:nfc:"
    assert uri_prefix(0x24) is None


def test_decode_uri():
    record = decode_uri(b'\x04example.com')
    assert record.prefix_code == 0x04
    assert record.suffix == "example.com"
    assert record.uri == "https://example.com"


def test_decode_uri_prefix_only():
    assert decode_uri(b'\x05').uri == "tel:"


def test_decode_uri_unknown_prefix():
    record = decode_uri(b'\x30foo')
    assert not record.known_prefix
    assert record.prefix == "Unknown prefix"
    assert record.uri == "Unknown prefixfoo"


def test_decode_empty_uri_payload():
    with pytest.raises(EmptyURIPayload):
        decode_uri(b'')


@pytest.mark.parametrize('uri, payload', [
    ("https://example.com", b'\x04example.com'),
    ("http://example.com", b'\x04example.com'),
    ("ftp://files.example.com", b'\x04ftp://files.example.com'),
    ("https://http://x", b'\x04http://x'),
    ("example.com", b'\x04example.com'),
])
def test_encode_uri_always_uses_https_code(uri, payload):
    assert encode_uri(uri) == payload


@pytest.mark.parametrize('uri', [
    "https://example.com",
    "https://dnd.qrand.me/r/04A1B2C4D5E6F7",
    "https://www.example.com/päth?q=1",
])
def test_https_uri_round_trip(uri):
    assert decode_uri(encode_uri(uri)).uri == uri


@pytest.mark.parametrize('uri, code', [
    ("http://www.example.com", 0x01),
    ("https://www.example.com", 0x02),
    ("http://example.com", 0x03),
    ("tel:+4412345", 0x05),
    ("urn:epc:id:sgtin:1", 0x1E),
    ("custom:thing", 0x00),
])
def test_compact_encoding_uses_longest_prefix(uri, code):
    payload = encode_uri(uri, compact=True)
    assert payload[0] == code
    assert decode_uri(payload).uri == uri


def test_longest_prefix_prefers_specific_entry():
    assert longest_prefix("urn:nfc:wkt:U") == (0x23, "wkt:U")
    assert longest_prefix("urn:other") == (0x13, "other")


def test_build_uri_record():
    assert build_uri_record("https://example.com") == (
        bytes([0xD1, 0x01, 0x0C, 0x55, 0x04]) + b"example.com"
    )


def test_decode_text():
    record = decode_text(bytes([0x02]) + b'en' + b'Hello')
    assert record.language == "en"
    assert not record.utf16
    assert record.encoding == "UTF-8"
    assert record.text == "Hello"


def test_decode_utf16_text_with_bom():
    payload = bytes([0x82]) + b'en' + b'\xff\xfe' + "hi".encode('utf-16-le')
    record = decode_text(payload)
    assert record.utf16
    assert record.text == "hi"


def test_text_codec_round_trip():
    payload = encode_text("Grüße", "de", utf16=True)
    assert payload[0] == 0x82
    record = decode_text(payload)
    assert record.language == "de"
    assert record.text == "Grüße"


def test_encode_text_default_language():
    assert encode_text("NFC") == b'\x02enNFC'


@pytest.mark.parametrize('payload', [
    b'',
    bytes([0x05]) + b'en',
    bytes([0x3F]),
])
def test_invalid_text_payload(payload):
    with pytest.raises(InvalidTextRecord):
        decode_text(payload)


def test_encode_text_rejects_long_language():
    with pytest.raises(InvalidTextRecord):
        encode_text("x", "a" * 64)
