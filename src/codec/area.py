"""Decoding of a Type 2 tag data area into positioned TLV blocks and records."""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

import ndef

from .data import (
    DecodeResult,
    NDEFMessage,
    NDEFRecord,
    RecordFlags,
    TextRecord,
    TLVEntry,
    TLVKind,
    URIRecord,
)
from .exceptions import NDEFError
from .message import decode_message
from .payloads import TEXT_TYPE, URI_TYPE, decode_text, decode_uri
from .record import encode_record
from .tlv import PAGE_SIZE, decode_tlv

PayloadValue = Union[URIRecord, TextRecord, str, None]


@dataclass
class RecordView:
    """A record together with its interpreted payload."""
    record: NDEFRecord
    value: PayloadValue = None
    error: Optional[NDEFError] = None


@dataclass
class AreaEntry:
    """TLV block with its page position and decoded contents."""
    entry: TLVEntry
    page: int
    byte_in_page: int
    message: Optional[DecodeResult[NDEFMessage]] = None
    records: List[RecordView] = field(default_factory=list)


@dataclass
class DataArea:
    """Decoded contents of a tag data area."""
    start_page: int
    entries: List[AreaEntry] = field(default_factory=list)

    @property
    def found_ndef(self) -> bool:
        return any(e.entry.kind is TLVKind.NDEF_MESSAGE for e in self.entries)

    @property
    def terminated(self) -> bool:
        return bool(self.entries) and self.entries[-1].entry.kind is TLVKind.TERMINATOR

    @property
    def messages(self) -> List[NDEFMessage]:
        return [e.message.value for e in self.entries if e.message is not None]

    @property
    def errors(self) -> List[NDEFError]:
        found = []
        for item in self.entries:
            if item.entry.error is not None:
                found.append(item.entry.error)
            if item.message is not None and item.message.error is not None:
                found.append(item.message.error)
            found.extend(view.error for view in item.records if view.error is not None)
        return found


def describe_record(record: NDEFRecord) -> str:
    """Describe a record of a type without a local payload codec."""
    try:
        octets = encode_record(replace(record, flags=RecordFlags(mb=True, me=True)))
        decoded = next(ndef.message_decoder(octets, errors='relax'))
        return str(decoded)
    except (NDEFError, ndef.DecodeError, StopIteration, ValueError) as e:
        logging.debug(f"Record description fallback: {e}")
        return f"Record type '{record.type_name}' with {len(record.payload)} byte payload"


def interpret_record(record: NDEFRecord) -> DecodeResult[PayloadValue]:
    """Interpret a record payload by its type."""
    try:
        if record.is_well_known(URI_TYPE):
            return DecodeResult(decode_uri(record.payload))
        if record.is_well_known(TEXT_TYPE):
            return DecodeResult(decode_text(record.payload))
    except NDEFError as e:
        return DecodeResult(None, e)
    if not record.type and not record.payload:
        return DecodeResult(None)
    return DecodeResult(describe_record(record))


def decode_data_area(buffer: bytes, start_page: int = 4) -> DataArea:
    """Decode the data area bytes read from ``start_page`` onward.

    Every TLV block is located by page and byte, NDEF Message blocks are
    decoded into records and each record's payload is interpreted.
    """
    area = DataArea(start_page)
    for entry in decode_tlv(buffer):
        item = AreaEntry(
            entry=entry,
            page=start_page + entry.offset // PAGE_SIZE,
            byte_in_page=entry.offset % PAGE_SIZE,
        )
        if entry.kind is TLVKind.NDEF_MESSAGE:
            item.message = decode_message(entry.value)
            for record in item.message.value:
                result = interpret_record(record)
                item.records.append(RecordView(record, result.value, result.error))
        area.entries.append(item)

    if not area.found_ndef:
        logging.debug(f"No NDEF TLV found in data area starting at page {start_page}")
    return area
