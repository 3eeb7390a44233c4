"""TLV framing of the Type 2 tag data area."""

import logging
from typing import Iterator

from .data import TLVEntry, TLVKind
from .exceptions import MalformedTLV, UnsupportedLength

TLV_NULL = 0x00
TLV_LOCK_CONTROL = 0x01
TLV_MEMORY_CONTROL = 0x02
TLV_NDEF_MESSAGE = 0x03
TLV_TERMINATOR = 0xFE

MAX_SHORT_LENGTH = 254
PAGE_SIZE = 4

_LENGTH_KINDS = {
    TLV_LOCK_CONTROL: TLVKind.LOCK_CONTROL,
    TLV_MEMORY_CONTROL: TLVKind.MEMORY_CONTROL,
    TLV_NDEF_MESSAGE: TLVKind.NDEF_MESSAGE,
}


class TLVReader:
    """Iterable over the TLV blocks of a buffer.

    Each iteration starts a fresh scan at ``start``, so the same reader can be
    walked more than once. Scanning stops after a terminator, after a
    truncated block, or at the end of the buffer.
    """

    def __init__(self, buffer: bytes, start: int = 0):
        self.buffer = bytes(buffer)
        self.start = start

    def __iter__(self) -> Iterator[TLVEntry]:
        data = self.buffer
        offset = self.start

        while offset < len(data):
            tag = data[offset]

            if tag == TLV_NULL:
                yield TLVEntry(offset, tag, TLVKind.NULL)
                offset += 1
                continue

            if tag == TLV_TERMINATOR:
                yield TLVEntry(offset, tag, TLVKind.TERMINATOR)
                return

            if tag > TLV_TERMINATOR:
                logging.debug(f"Invalid TLV type 0x{tag:02X} at offset {offset}")
                yield TLVEntry(offset, tag, TLVKind.INVALID)
                offset += 1
                continue

            kind = _LENGTH_KINDS.get(tag, TLVKind.PROPRIETARY)

            if offset + 1 >= len(data):
                error = MalformedTLV(f"Missing length byte for TLV 0x{tag:02X} at offset {offset}")
                logging.debug(str(error))
                yield TLVEntry(offset, tag, kind, error=error)
                return

            length = data[offset + 1]
            value_start = offset + 2
            value = data[value_start:value_start + length]

            if len(value) < length:
                error = MalformedTLV(
                    f"TLV 0x{tag:02X} length ({length}) exceeds available data "
                    f"({len(value)} bytes remaining)"
                )
                logging.debug(str(error))
                yield TLVEntry(offset, tag, kind, value, length, error)
                return

            yield TLVEntry(offset, tag, kind, value, length)
            offset = value_start + length


def decode_tlv(buffer: bytes, start: int = 0) -> TLVReader:
    """Scan ``buffer`` for TLV blocks starting at ``start``."""
    return TLVReader(buffer, start)


def find_ndef_message(buffer: bytes, start: int = 0):
    """Return the first NDEF Message TLV entry in ``buffer`` or None."""
    for entry in decode_tlv(buffer, start):
        if entry.kind is TLVKind.NDEF_MESSAGE:
            return entry
    return None


def encode_tlv(message: bytes) -> bytes:
    """Wrap an NDEF message in an NDEF TLV followed by a terminator.

    The result is zero padded to a whole number of pages.
    """
    if len(message) > MAX_SHORT_LENGTH:
        raise UnsupportedLength(
            f"NDEF too large for single-byte TLV length: {len(message)}"
        )

    tlv = bytes([TLV_NDEF_MESSAGE, len(message)]) + bytes(message) + bytes([TLV_TERMINATOR])
    pad = (PAGE_SIZE - len(tlv) % PAGE_SIZE) % PAGE_SIZE
    return tlv + bytes(pad)
