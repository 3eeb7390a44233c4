"""NDEF record encoding and decoding."""

import logging
import struct
from typing import Optional

from .data import DecodeResult, NDEFRecord, RecordFlags
from .exceptions import EncodingError, MalformedRecord, PayloadTooLarge

MAX_SHORT_PAYLOAD = 255
MAX_FIELD_LENGTH = 255


class _Cursor:
    """Forward-only reader over a record buffer."""

    def __init__(self, data: bytes, offset: int):
        self.data = data
        self.start = offset
        self.pos = offset

    @property
    def consumed(self) -> int:
        return self.pos - self.start

    def byte(self) -> Optional[int]:
        if self.pos >= len(self.data):
            return None
        value = self.data[self.pos]
        self.pos += 1
        return value

    def take(self, length: int) -> bytes:
        """Read up to ``length`` bytes; fewer are returned at end of data."""
        chunk = self.data[self.pos:self.pos + length]
        self.pos += len(chunk)
        return chunk


def decode_record(buffer: bytes, offset: int = 0) -> DecodeResult[Optional[NDEFRecord]]:
    """Decode one NDEF record starting at ``offset``.

    When a declared length runs past the end of the buffer, the record is
    returned with whatever type, id and payload bytes are present and the
    result carries a MalformedRecord error. ``consumed`` is the number of
    bytes read.
    """
    cursor = _Cursor(bytes(buffer), offset)

    header = cursor.byte()
    if header is None:
        return DecodeResult(None, MalformedRecord("Unexpected end of data"), 0)

    flags = RecordFlags.from_header(header)
    record = NDEFRecord(
        tnf=header & RecordFlags.TNF_MASK,
        type=b'',
        id=b'' if flags.il else None,
        flags=flags,
    )

    def truncated(message: str) -> DecodeResult:
        logging.debug(f"NDEF record at offset {offset}: {message}")
        return DecodeResult(record, MalformedRecord(message), cursor.consumed)

    type_length = cursor.byte()
    if type_length is None:
        return truncated("Missing type length")

    if flags.sr:
        payload_length = cursor.byte()
        if payload_length is None:
            return truncated("Missing payload length (short record)")
    else:
        length_bytes = cursor.take(4)
        if len(length_bytes) < 4:
            return truncated("Missing payload length (long record)")
        payload_length = struct.unpack('>I', length_bytes)[0]

    id_length = 0
    if flags.il:
        id_length = cursor.byte()
        if id_length is None:
            return truncated("Missing ID length")

    record.type = cursor.take(type_length)
    if len(record.type) < type_length:
        return truncated(f"Type length ({type_length}) exceeds remaining data")

    if flags.il:
        record.id = cursor.take(id_length)
        if len(record.id) < id_length:
            return truncated(f"ID length ({id_length}) exceeds remaining data")

    record.payload = cursor.take(payload_length)
    if len(record.payload) < payload_length:
        return truncated(
            f"Payload length ({payload_length}) exceeds remaining data "
            f"({len(record.payload)} bytes)"
        )

    return DecodeResult(record, None, cursor.consumed)


def encode_record(record: NDEFRecord) -> bytes:
    """Encode a record as a short record.

    MB and ME are taken from ``record.flags``; SR is always set, CF is always
    clear and IL follows whether the record has an id.
    """
    payload = bytes(record.payload)
    if len(payload) > MAX_SHORT_PAYLOAD:
        raise PayloadTooLarge(
            f"Payload of {len(payload)} bytes does not fit a short record "
            f"(max {MAX_SHORT_PAYLOAD})"
        )
    if len(record.type) > MAX_FIELD_LENGTH:
        raise EncodingError(f"Record type too long ({len(record.type)} bytes)")
    if record.id is not None and len(record.id) > MAX_FIELD_LENGTH:
        raise EncodingError(f"Record id too long ({len(record.id)} bytes)")
    if not 0 <= record.tnf <= RecordFlags.TNF_MASK:
        raise EncodingError(f"Invalid TNF value {record.tnf}")

    flags = RecordFlags(
        mb=record.flags.mb,
        me=record.flags.me,
        sr=True,
        il=record.id is not None,
    )

    encoded = bytearray([flags.header(record.tnf), len(record.type), len(payload)])
    if flags.il:
        encoded.append(len(record.id))
    encoded += record.type
    if flags.il:
        encoded += record.id
    encoded += payload
    return bytes(encoded)
