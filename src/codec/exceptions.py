"""NDEF and TLV codec exceptions."""


class NDEFError(Exception):
    """Base exception for tag data format errors."""
    pass


class MalformedTLV(NDEFError):
    """TLV length or value runs past the end of the buffer."""
    pass


class MalformedRecord(NDEFError):
    """Declared record field length exceeds the buffer."""
    pass


class UnterminatedMessage(MalformedRecord):
    """Buffer ended before a record with the ME flag was seen."""
    pass


class UnsupportedLength(NDEFError):
    """NDEF message too long for a single-byte TLV length."""
    pass


class PayloadTooLarge(NDEFError):
    """Record payload too long for a short record."""
    pass


class EncodingError(NDEFError):
    """Record fields cannot be encoded."""
    pass


class EmptyMessage(EncodingError):
    """An NDEF message needs at least one record."""
    pass


class EmptyURIPayload(NDEFError):
    """URI record payload has no identifier code."""
    pass


class InvalidTextRecord(NDEFError):
    """Text record status byte does not match the payload."""
    pass
