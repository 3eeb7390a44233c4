"""NDEF message encoding and decoding."""

import logging
from dataclasses import replace
from typing import Iterable

from .data import DecodeResult, NDEFMessage, NDEFRecord
from .exceptions import EmptyMessage, UnterminatedMessage
from .record import decode_record, encode_record


def decode_message(buffer: bytes) -> DecodeResult[NDEFMessage]:
    """Decode the records of an NDEF message.

    Decoding stops at the first record with ME set. A buffer that runs out
    first still yields the records found so far, with an UnterminatedMessage
    error; a truncated record is kept and its error reported.
    """
    data = bytes(buffer)
    message = NDEFMessage()
    offset = 0

    while offset < len(data):
        result = decode_record(data, offset)
        if result.value is not None:
            message.records.append(result.value)
        offset += result.consumed

        if not result.ok:
            return DecodeResult(message, result.error, offset)
        if result.value.flags.me:
            logging.debug(f"End of NDEF message after {len(message)} record(s)")
            return DecodeResult(message, None, offset)

    if not message.records:
        return DecodeResult(message, None, offset)

    error = UnterminatedMessage(
        f"NDEF message ended after {len(message)} record(s) without ME flag"
    )
    logging.debug(str(error))
    return DecodeResult(message, error, offset)


def build_message(records: Iterable[NDEFRecord]) -> bytes:
    """Encode records as one message, setting MB on the first and ME on the last."""
    records = list(records)
    if not records:
        raise EmptyMessage("An NDEF message needs at least one record")

    last = len(records) - 1
    encoded = bytearray()
    for index, record in enumerate(records):
        flags = replace(record.flags, mb=index == 0, me=index == last, cf=False)
        encoded += encode_record(replace(record, flags=flags))
    return bytes(encoded)
