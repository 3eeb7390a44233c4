"""NFC Forum Type 2 data format codec."""

from .area import DataArea, decode_data_area, interpret_record
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
from .message import build_message, decode_message
from .payloads import build_uri_record, decode_text, decode_uri, encode_text, encode_uri
from .record import decode_record, encode_record
from .tlv import decode_tlv, encode_tlv

wrap_as_tlv = encode_tlv
