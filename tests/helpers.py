"""Tag memory images shared by the test modules."""

UID = bytes.fromhex('04A1B2C4D5E6F7')


def build_memory(page_count, manufacturer=0x04, cc=b'\xE1\x10\x12\x00', data=b'',
                 lock0=0x00, lock1=0x00, pages=None):
    """Tag memory image with a 7-byte UID, CC and data area contents."""
    memory = bytearray(page_count * 4)
    memory[0:4] = bytes([manufacturer, 0xA1, 0xB2, 0x9C])
    memory[4:8] = bytes([0xC4, 0xD5, 0xE6, 0xF7])
    memory[8:12] = bytes([0x27, 0x48, lock0, lock1])
    memory[12:16] = cc
    memory[16:16 + len(data)] = data
    for page, content in (pages or {}).items():
        memory[page * 4:page * 4 + 4] = content
    return bytes(memory)
