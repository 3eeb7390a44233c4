from src.codec.area import decode_data_area, describe_record, interpret_record
from src.codec.data import NDEFRecord, TextRecord, TLVKind, TNF_EMPTY, TNF_MEDIA, URIRecord
from src.codec.exceptions import EmptyURIPayload, MalformedRecord, MalformedTLV
from src.codec.message import build_message
from src.codec.payloads import text_record, uri_record
from src.codec.tlv import encode_tlv


def test_entries_are_located_by_page_and_byte():
    message = build_message([uri_record("https://example.com")])
    area = decode_data_area(bytes([0x00, 0x00, 0x00]) + encode_tlv(message), start_page=4)

    positions = [(e.page, e.byte_in_page, e.entry.kind) for e in area.entries]
    assert positions[:4] == [
        (4, 0, TLVKind.NULL),
        (4, 1, TLVKind.NULL),
        (4, 2, TLVKind.NULL),
        (4, 3, TLVKind.NDEF_MESSAGE),
    ]
    terminator = area.entries[-1]
    assert terminator.entry.kind is TLVKind.TERMINATOR
    assert (terminator.page, terminator.byte_in_page) == (9, 1)
    assert area.found_ndef
    assert area.terminated
    assert area.errors == []


def test_uri_and_text_records_are_interpreted():
    message = build_message([uri_record("https://example.com"), text_record("hello", "fr")])
    area = decode_data_area(encode_tlv(message))

    views = area.entries[0].records
    assert isinstance(views[0].value, URIRecord)
    assert views[0].value.uri == "https://example.com"
    assert isinstance(views[1].value, TextRecord)
    assert views[1].value.text == "hello"
    assert views[1].value.language == "fr"
    assert len(area.messages) == 1


def test_empty_data_area():
    area = decode_data_area(bytes([0x00, 0x00, 0x00, 0xFE]))
    assert not area.found_ndef
    assert area.terminated
    assert area.messages == []


def test_empty_uri_payload_is_reported_on_the_record():
    message = build_message([NDEFRecord(1, b'U', b'')])
    area = decode_data_area(encode_tlv(message))

    view = area.entries[0].records[0]
    assert view.value is None
    assert isinstance(view.error, EmptyURIPayload)
    assert area.errors == [view.error]


def test_truncated_tlv_is_reported():
    area = decode_data_area(bytes([0x03, 0x10, 0xD1, 0x01, 0x0C, 0x55, 0x04, 0x65]))

    item = area.entries[0]
    assert isinstance(item.entry.error, MalformedTLV)
    assert isinstance(item.message.error, MalformedRecord)
    assert len(area.errors) == 2
    assert not area.terminated


def test_media_record_is_described():
    record = NDEFRecord(TNF_MEDIA, b'text/plain', b'hello')
    result = interpret_record(record)

    assert result.ok
    assert isinstance(result.value, str)
    assert 'text/plain' in result.value


def test_empty_record_has_no_value():
    result = interpret_record(NDEFRecord(TNF_EMPTY, b''))
    assert result.ok
    assert result.value is None


def test_describe_record_falls_back_on_encoding_errors():
    record = NDEFRecord(TNF_MEDIA, b'application/octet-stream', bytes(300))
    assert describe_record(record) == (
        "Record type 'application/octet-stream' with 300 byte payload"
    )


def test_undecodable_type_is_described_generically():
    area = decode_data_area(bytes([0x03, 0x04, 0xD1, 0x01, 0x00, 0x80, 0xFE]))

    view = area.entries[0].records[0]
    assert view.error is None
    assert view.value == "Record type '\x80' with 0 byte payload"
    assert area.terminated


def test_control_character_media_type_is_described_generically():
    area = decode_data_area(bytes([0x03, 0x04, 0xD2, 0x01, 0x00, 0x00, 0xFE]))

    view = area.entries[0].records[0]
    assert view.error is None
    assert view.value == "Record type '\x00' with 0 byte payload"
