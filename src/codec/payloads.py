"""Payload codecs for the well-known URI ('U') and Text ('T') record types."""

from .data import NDEFRecord, RecordFlags, TextRecord, TNF_WELL_KNOWN, URIRecord
from .exceptions import EmptyURIPayload, InvalidTextRecord
from .message import build_message
from .prefixes import HTTPS_CODE, longest_prefix

URI_TYPE = b'U'
TEXT_TYPE = b'T'

TEXT_UTF16_FLAG = 0x80
TEXT_LANGUAGE_MASK = 0x3F

_STRIPPED_SCHEMES = ("https://", "http://")


def decode_uri(payload: bytes) -> URIRecord:
    """Split a URI payload into identifier code and suffix."""
    if not payload:
        raise EmptyURIPayload("Empty URI payload")
    return URIRecord(payload[0], bytes(payload[1:]).decode('utf-8', errors='replace'))


def encode_uri(uri: str, compact: bool = False) -> bytes:
    """Build a URI payload.

    By default the payload always uses identifier code 0x04 ("https://") and
    only a leading "https://" or "http://" is removed from ``uri``; any other
    scheme stays in the suffix. With ``compact`` the longest matching prefix
    from the identifier table is used instead.
    """
    if compact:
        code, suffix = longest_prefix(uri)
        return bytes([code]) + suffix.encode('utf-8')

    suffix = uri
    for scheme in _STRIPPED_SCHEMES:
        if suffix.startswith(scheme):
            suffix = suffix[len(scheme):]
            break
    return bytes([HTTPS_CODE]) + suffix.encode('utf-8')


def decode_text(payload: bytes) -> TextRecord:
    """Split a text payload into encoding flag, language code and text bytes."""
    if not payload:
        raise InvalidTextRecord("Empty text payload")

    status = payload[0]
    language_length = status & TEXT_LANGUAGE_MASK
    if len(payload) < 1 + language_length:
        raise InvalidTextRecord(
            f"Language code length ({language_length}) exceeds payload "
            f"({len(payload) - 1} bytes)"
        )

    language = bytes(payload[1:1 + language_length]).decode('ascii', errors='replace')
    return TextRecord(
        utf16=bool(status & TEXT_UTF16_FLAG),
        language=language,
        data=bytes(payload[1 + language_length:]),
    )


def encode_text(text: str, language: str = 'en', utf16: bool = False) -> bytes:
    """Build a text payload: status byte, language code, encoded text."""
    lang = language.encode('ascii')
    if len(lang) > TEXT_LANGUAGE_MASK:
        raise InvalidTextRecord(f"Language code too long ({len(lang)} bytes)")

    status = len(lang)
    if utf16:
        status |= TEXT_UTF16_FLAG
        data = text.encode('utf-16-be')
    else:
        data = text.encode('utf-8')
    return bytes([status]) + lang + data


def uri_record(uri: str, compact: bool = False) -> NDEFRecord:
    """Well-known URI record for ``uri``."""
    return NDEFRecord(TNF_WELL_KNOWN, URI_TYPE, encode_uri(uri, compact), flags=RecordFlags())


def text_record(text: str, language: str = 'en', utf16: bool = False) -> NDEFRecord:
    """Well-known text record for ``text``."""
    return NDEFRecord(TNF_WELL_KNOWN, TEXT_TYPE, encode_text(text, language, utf16),
                      flags=RecordFlags())


def build_uri_record(uri: str, compact: bool = False) -> bytes:
    """Encode ``uri`` as a single-record NDEF message."""
    return build_message([uri_record(uri, compact)])
